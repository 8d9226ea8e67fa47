"""OpenAI test fixtures"""

# Simple chat request
OPENAI_CHAT_REQUEST = {
    "model": "gpt-4o",
    "messages": [
        {
            "role": "system",
            "content": "You are a helpful assistant.",
        },
        {
            "role": "user",
            "content": "Hello, how are you?",
        },
    ],
    "temperature": 0.7,
    "max_tokens": 100,
}

# Simple chat response
OPENAI_CHAT_RESPONSE = {
    "id": "chatcmpl-123",
    "object": "chat.completion",
    "created": 1677652288,
    "model": "gpt-4o",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "Hello! I'm doing well, thank you. How can I help you today?",
            },
            "finish_reason": "stop",
        }
    ],
    "usage": {
        "prompt_tokens": 20,
        "completion_tokens": 12,
        "total_tokens": 32,
    },
}

# Tool-enabled request
OPENAI_TOOL_REQUEST = {
    "model": "gpt-4o",
    "messages": [
        {
            "role": "user",
            "content": "What's the weather like in Beijing?",
        }
    ],
    "tools": [
        {
            "type": "function",
            "function": {
                "name": "get_weather",
                "description": "Get weather information",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "location": {
                            "type": "string",
                            "description": "City name",
                        },
                        "unit": {
                            "type": "string",
                            "enum": ["celsius", "fahrenheit"],
                        },
                    },
                    "required": ["location"],
                },
            },
        }
    ],
    "tool_choice": "auto",
}

# Tool call response
OPENAI_TOOL_RESPONSE = {
    "id": "chatcmpl-124",
    "object": "chat.completion",
    "created": 1677652300,
    "model": "gpt-4o",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": "call_abc123",
                        "type": "function",
                        "function": {
                            "name": "get_weather",
                            "arguments": '{"location":"Beijing","unit":"celsius"}',
                        },
                    }
                ],
            },
            "finish_reason": "tool_calls",
        }
    ],
    "usage": {
        "prompt_tokens": 82,
        "completion_tokens": 18,
        "total_tokens": 100,
    },
}

# Conversation carrying a tool result back to the model
OPENAI_TOOL_RESULT_REQUEST = {
    "model": "gpt-4o",
    "messages": [
        {
            "role": "user",
            "content": "What's the weather like in Beijing?",
        },
        {
            "role": "assistant",
            "content": None,
            "tool_calls": [
                {
                    "id": "call_abc123",
                    "type": "function",
                    "function": {
                        "name": "get_weather",
                        "arguments": '{"location":"Beijing"}',
                    },
                }
            ],
        },
        {
            "role": "tool",
            "tool_call_id": "call_abc123",
            "content": '{"temperature":22,"condition":"sunny"}',
        },
    ],
    "max_tokens": 200,
}

# Text plus image request
OPENAI_MULTIMODAL_REQUEST = {
    "model": "gpt-4o",
    "messages": [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "What is in this image?"},
                {
                    "type": "image_url",
                    "image_url": {"url": "https://example.com/cat.png"},
                },
            ],
        }
    ],
    "max_tokens": 300,
}

# Structured output and sampling controls
OPENAI_FULL_REQUEST = {
    "model": "gpt-4o",
    "messages": [
        {"role": "system", "content": "Answer in JSON."},
        {"role": "user", "content": "List three colors."},
    ],
    "max_tokens": 256,
    "temperature": 0.2,
    "top_p": 0.9,
    "frequency_penalty": 0.1,
    "presence_penalty": 0.3,
    "seed": 42,
    "stop": ["END"],
    "response_format": {
        "type": "json_schema",
        "json_schema": {
            "name": "colors",
            "schema": {
                "type": "object",
                "properties": {"colors": {"type": "array", "items": {"type": "string"}}},
                "required": ["colors"],
            },
            "strict": True,
        },
    },
}

# Web search through the chat completions search options
OPENAI_WEB_SEARCH_REQUEST = {
    "model": "gpt-4o-search-preview",
    "messages": [
        {"role": "user", "content": "What happened in the news today?"},
    ],
    "web_search_options": {"search_context_size": "low"},
}

# Reasoning model request
OPENAI_REASONING_REQUEST = {
    "model": "o3-mini",
    "messages": [
        {"role": "user", "content": "Prove that there are infinitely many primes."},
    ],
    "max_tokens": 2000,
    "reasoning_effort": "high",
}

# Usage with cached prompt and reasoning tokens
OPENAI_CACHED_RESPONSE = {
    "id": "chatcmpl-125",
    "object": "chat.completion",
    "created": 1677652400,
    "model": "o3-mini",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Suppose there are finitely many."},
            "finish_reason": "stop",
        }
    ],
    "usage": {
        "prompt_tokens": 1200,
        "completion_tokens": 400,
        "total_tokens": 1600,
        "prompt_tokens_details": {"cached_tokens": 1024},
        "completion_tokens_details": {"reasoning_tokens": 300},
    },
}

# Error response
OPENAI_ERROR_RESPONSE = {
    "error": {
        "message": "Rate limit reached",
        "type": "rate_limit_error",
        "code": "rate_limit_exceeded",
    }
}

# Streaming text chunks
OPENAI_STREAM_CHUNKS = [
    {
        "id": "chatcmpl-200",
        "object": "chat.completion.chunk",
        "created": 1677652500,
        "model": "gpt-4o",
        "choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}, "finish_reason": None}],
    },
    {
        "id": "chatcmpl-200",
        "object": "chat.completion.chunk",
        "created": 1677652500,
        "model": "gpt-4o",
        "choices": [{"index": 0, "delta": {"content": "Hello"}, "finish_reason": None}],
    },
    {
        "id": "chatcmpl-200",
        "object": "chat.completion.chunk",
        "created": 1677652500,
        "model": "gpt-4o",
        "choices": [{"index": 0, "delta": {"content": " there!"}, "finish_reason": None}],
    },
    {
        "id": "chatcmpl-200",
        "object": "chat.completion.chunk",
        "created": 1677652500,
        "model": "gpt-4o",
        "choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
    },
    "[DONE]",
]

# Streaming tool call split across two argument fragments
OPENAI_STREAM_TOOL_CHUNKS = [
    {
        "id": "chatcmpl-201",
        "object": "chat.completion.chunk",
        "created": 1677652600,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "delta": {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "index": 0,
                            "id": "call_weather1",
                            "type": "function",
                            "function": {"name": "get_weather", "arguments": '{"locat'},
                        }
                    ],
                },
                "finish_reason": None,
            }
        ],
    },
    {
        "id": "chatcmpl-201",
        "object": "chat.completion.chunk",
        "created": 1677652600,
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "delta": {"tool_calls": [{"index": 0, "function": {"arguments": 'ion":"NYC"}'}}]},
                "finish_reason": None,
            }
        ],
    },
    {
        "id": "chatcmpl-201",
        "object": "chat.completion.chunk",
        "created": 1677652600,
        "model": "gpt-4o",
        "choices": [{"index": 0, "delta": {}, "finish_reason": "tool_calls"}],
        "usage": {"prompt_tokens": 40, "completion_tokens": 15, "total_tokens": 55},
    },
    "[DONE]",
]
