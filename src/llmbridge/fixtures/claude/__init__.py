"""Claude test fixtures"""

# Simple chat request
CLAUDE_CHAT_REQUEST = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 1024,
    "system": "You are a helpful assistant.",
    "messages": [
        {
            "role": "user",
            "content": "Hello, how are you?",
        }
    ],
}

# Simple chat response
CLAUDE_CHAT_RESPONSE = {
    "id": "msg_123",
    "type": "message",
    "role": "assistant",
    "model": "claude-sonnet-4-20250514",
    "content": [
        {
            "type": "text",
            "text": "Hello! I'm doing well, thank you.",
        }
    ],
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {
        "input_tokens": 12,
        "output_tokens": 10,
    },
}

# Tool-enabled request
CLAUDE_TOOL_REQUEST = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 1024,
    "messages": [
        {
            "role": "user",
            "content": "What's the weather like in Beijing?",
        }
    ],
    "tools": [
        {
            "name": "get_weather",
            "description": "Get weather information",
            "input_schema": {
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
    ],
    "tool_choice": {"type": "auto"},
}

# Tool use response
CLAUDE_TOOL_RESPONSE = {
    "id": "msg_124",
    "type": "message",
    "role": "assistant",
    "model": "claude-sonnet-4-20250514",
    "content": [
        {
            "type": "text",
            "text": "Let me check the weather.",
        },
        {
            "type": "tool_use",
            "id": "toolu_01A",
            "name": "get_weather",
            "input": {"location": "Beijing"},
        },
    ],
    "stop_reason": "tool_use",
    "stop_sequence": None,
    "usage": {
        "input_tokens": 80,
        "output_tokens": 30,
    },
}

# Conversation carrying a tool result back to the model
CLAUDE_TOOL_RESULT_REQUEST = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 1024,
    "messages": [
        {
            "role": "user",
            "content": "What's the weather like in Beijing?",
        },
        {
            "role": "assistant",
            "content": [
                {
                    "type": "tool_use",
                    "id": "toolu_01A",
                    "name": "get_weather",
                    "input": {"location": "Beijing"},
                }
            ],
        },
        {
            "role": "user",
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": "toolu_01A",
                    "content": "22 degrees and sunny",
                }
            ],
        },
    ],
}

# Text plus image request
CLAUDE_MULTIMODAL_REQUEST = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 512,
    "messages": [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "What is in this image?"},
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": "image/png",
                        "data": "iVBORw0KGgo=",
                    },
                },
            ],
        }
    ],
}

# Native web search tool
CLAUDE_WEB_SEARCH_REQUEST = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 1024,
    "messages": [
        {"role": "user", "content": "What happened in the news today?"},
    ],
    "tools": [
        {
            "type": "web_search_20250305",
            "name": "web_search",
            "max_uses": 5,
        }
    ],
}

# Extended thinking request
CLAUDE_THINKING_REQUEST = {
    "model": "claude-sonnet-4-20250514",
    "max_tokens": 8000,
    "thinking": {"type": "enabled", "budget_tokens": 4096},
    "messages": [
        {"role": "user", "content": "Prove that there are infinitely many primes."},
    ],
}

# Extended thinking response
CLAUDE_THINKING_RESPONSE = {
    "id": "msg_125",
    "type": "message",
    "role": "assistant",
    "model": "claude-sonnet-4-20250514",
    "content": [
        {
            "type": "thinking",
            "thinking": "Assume a finite list and multiply.",
            "signature": "",
        },
        {
            "type": "text",
            "text": "Suppose there are finitely many primes.",
        },
    ],
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {
        "input_tokens": 30,
        "output_tokens": 120,
    },
}

# Response with cached prompt tokens
CLAUDE_CACHE_RESPONSE = {
    "id": "msg_126",
    "type": "message",
    "role": "assistant",
    "model": "claude-sonnet-4-20250514",
    "content": [{"type": "text", "text": "Cached answer."}],
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {
        "input_tokens": 50,
        "output_tokens": 20,
        "cache_creation_input_tokens": 100,
        "cache_read_input_tokens": 900,
    },
}

# Error response
CLAUDE_ERROR_RESPONSE = {
    "type": "error",
    "error": {
        "type": "overloaded_error",
        "message": "Overloaded",
    },
}

# Streaming text events
CLAUDE_STREAM_EVENTS = [
    {
        "type": "message_start",
        "message": {
            "id": "msg_200",
            "type": "message",
            "role": "assistant",
            "model": "claude-sonnet-4-20250514",
            "content": [],
            "stop_reason": None,
            "stop_sequence": None,
            "usage": {"input_tokens": 9, "output_tokens": 1},
        },
    },
    {
        "type": "content_block_start",
        "index": 0,
        "content_block": {"type": "text", "text": ""},
    },
    {"type": "ping"},
    {
        "type": "content_block_delta",
        "index": 0,
        "delta": {"type": "text_delta", "text": "Hello"},
    },
    {
        "type": "content_block_delta",
        "index": 0,
        "delta": {"type": "text_delta", "text": " there!"},
    },
    {"type": "content_block_stop", "index": 0},
    {
        "type": "message_delta",
        "delta": {"stop_reason": "end_turn", "stop_sequence": None},
        "usage": {"output_tokens": 3},
    },
    {"type": "message_stop"},
]

# Streaming tool use events
CLAUDE_STREAM_TOOL_EVENTS = [
    {
        "type": "message_start",
        "message": {
            "id": "msg_201",
            "type": "message",
            "role": "assistant",
            "model": "claude-sonnet-4-20250514",
            "content": [],
            "stop_reason": None,
            "stop_sequence": None,
            "usage": {"input_tokens": 40, "output_tokens": 1},
        },
    },
    {
        "type": "content_block_start",
        "index": 0,
        "content_block": {"type": "text", "text": ""},
    },
    {
        "type": "content_block_delta",
        "index": 0,
        "delta": {"type": "text_delta", "text": "Checking."},
    },
    {"type": "content_block_stop", "index": 0},
    {
        "type": "content_block_start",
        "index": 1,
        "content_block": {"type": "tool_use", "id": "toolu_02B", "name": "get_weather", "input": {}},
    },
    {
        "type": "content_block_delta",
        "index": 1,
        "delta": {"type": "input_json_delta", "partial_json": '{"locat'},
    },
    {
        "type": "content_block_delta",
        "index": 1,
        "delta": {"type": "input_json_delta", "partial_json": 'ion":"NYC"}'},
    },
    {"type": "content_block_stop", "index": 1},
    {
        "type": "message_delta",
        "delta": {"stop_reason": "tool_use", "stop_sequence": None},
        "usage": {"output_tokens": 25},
    },
    {"type": "message_stop"},
]
