"""Gemini test fixtures"""

# Simple chat request
GEMINI_CHAT_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": "Hello, how are you?"}],
        }
    ],
    "systemInstruction": {
        "parts": [{"text": "You are a helpful assistant."}],
    },
    "generationConfig": {
        "temperature": 0.7,
        "maxOutputTokens": 100,
    },
}

# Simple chat response
GEMINI_CHAT_RESPONSE = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [{"text": "Hello! I'm doing well, thank you."}],
            },
            "finishReason": "STOP",
            "index": 0,
        }
    ],
    "usageMetadata": {
        "promptTokenCount": 12,
        "candidatesTokenCount": 9,
        "totalTokenCount": 21,
    },
    "modelVersion": "gemini-2.5-flash",
    "responseId": "resp-123",
}

# Tool-enabled request
GEMINI_TOOL_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": "What's the weather like in Beijing?"}],
        }
    ],
    "tools": [
        {
            "functionDeclarations": [
                {
                    "name": "get_weather",
                    "description": "Get weather information",
                    "parameters": {
                        "type": "object",
                        "properties": {
                            "location": {
                                "type": "string",
                                "description": "City name",
                            }
                        },
                        "required": ["location"],
                    },
                }
            ]
        }
    ],
    "toolConfig": {"functionCallingConfig": {"mode": "AUTO"}},
}

# Function call response
GEMINI_TOOL_RESPONSE = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [
                    {
                        "functionCall": {
                            "name": "get_weather",
                            "args": {"location": "Beijing"},
                        }
                    }
                ],
            },
            "finishReason": "STOP",
            "index": 0,
        }
    ],
    "usageMetadata": {
        "promptTokenCount": 70,
        "candidatesTokenCount": 8,
        "totalTokenCount": 78,
    },
    "modelVersion": "gemini-2.5-flash",
}

# Conversation carrying a function response back to the model
GEMINI_FUNCTION_RESPONSE_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": "What's the weather like in Beijing?"}],
        },
        {
            "role": "model",
            "parts": [{"functionCall": {"name": "get_weather", "args": {"location": "Beijing"}}}],
        },
        {
            "role": "user",
            "parts": [
                {
                    "functionResponse": {
                        "name": "get_weather",
                        "response": {"temperature": 22, "condition": "sunny"},
                    }
                }
            ],
        },
    ],
}

# Text plus inline image request
GEMINI_MULTIMODAL_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [
                {"text": "What is in this image?"},
                {"inlineData": {"mimeType": "image/png", "data": "iVBORw0KGgo="}},
            ],
        }
    ],
}

# Google Search grounding
GEMINI_SEARCH_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": "What happened in the news today?"}],
        }
    ],
    "tools": [{"googleSearch": {}}],
}

# JSON mode with a response schema
GEMINI_JSON_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": "List three colors."}],
        }
    ],
    "generationConfig": {
        "responseMimeType": "application/json",
        "responseSchema": {
            "type": "object",
            "properties": {"colors": {"type": "array", "items": {"type": "string"}}},
            "required": ["colors"],
            "propertyOrdering": ["colors"],
        },
    },
}

# Thinking request
GEMINI_THINKING_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": "Prove that there are infinitely many primes."}],
        }
    ],
    "generationConfig": {"thinkingConfig": {"thinkingBudget": 16384}},
}

# Thinking response; thoughts are reported outside candidatesTokenCount
GEMINI_THINKING_RESPONSE = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [
                    {"text": "Assume a finite list and multiply.", "thought": True},
                    {"text": "Suppose there are finitely many primes."},
                ],
            },
            "finishReason": "STOP",
            "index": 0,
        }
    ],
    "usageMetadata": {
        "promptTokenCount": 30,
        "candidatesTokenCount": 20,
        "thoughtsTokenCount": 100,
        "totalTokenCount": 150,
        "cachedContentTokenCount": 10,
    },
    "modelVersion": "gemini-2.5-pro",
}

# Blocked prompt
GEMINI_BLOCKED_RESPONSE = {
    "promptFeedback": {"blockReason": "SAFETY"},
    "usageMetadata": {"promptTokenCount": 8, "totalTokenCount": 8},
}

# Error response
GEMINI_ERROR_RESPONSE = {
    "error": {
        "code": 429,
        "message": "Resource has been exhausted",
        "status": "RESOURCE_EXHAUSTED",
    }
}

# Streaming text chunks
GEMINI_STREAM_CHUNKS = [
    {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": "Hello"}]},
                "index": 0,
            }
        ],
        "modelVersion": "gemini-2.5-flash",
        "responseId": "resp-200",
    },
    {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": " there!"}]},
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {
            "promptTokenCount": 9,
            "candidatesTokenCount": 3,
            "totalTokenCount": 12,
        },
        "modelVersion": "gemini-2.5-flash",
        "responseId": "resp-200",
    },
]

# Streaming function call
GEMINI_STREAM_TOOL_CHUNKS = [
    {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [{"functionCall": {"name": "get_weather", "args": {"location": "NYC"}}}],
                },
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {
            "promptTokenCount": 40,
            "candidatesTokenCount": 6,
            "totalTokenCount": 46,
        },
        "modelVersion": "gemini-2.5-flash",
        "responseId": "resp-201",
    },
]
