"""Sample provider payloads used by the tests and the example endpoints"""
