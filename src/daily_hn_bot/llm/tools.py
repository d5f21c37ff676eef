"""Tool catalogue offered to the chat model.

The three names and their argument schemas are a fixed contract with
resolver.decode_tool_call(); change them together.
"""

from ..schemas.commands import MAX_SUMMARY_INDEXES

REPLY_LATEST_STORY = "reply_latest_story"
PUSH_SUMMARY = "push_summary"
PUSH_URL_SUMMARY = "push_url_summary"

TOOL_CATALOGUE = [
    {
        "type": "function",
        "function": {
            "name": REPLY_LATEST_STORY,
            "description": "Get the latest story from the daily Hacker News RSS feed.",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    },
    {
        "type": "function",
        "function": {
            "name": PUSH_SUMMARY,
            "description": (
                "Push summaries of selected Hacker News stories to the user, by index "
                "(starting from 1, maximum index 10). The indexes are passed as an array of "
                f"integers with at most {MAX_SUMMARY_INDEXES} items. If the user asks for more "
                f"than {MAX_SUMMARY_INDEXES} stories, do not call this function; answer with an error instead."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "indexes": {
                        "type": "array",
                        "description": f"1-based story indexes, at most {MAX_SUMMARY_INDEXES} of them.",
                        "items": {"type": "integer", "minimum": 1},
                        "minItems": 1,
                        "maxItems": MAX_SUMMARY_INDEXES,
                    },
                },
                "required": ["indexes"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": PUSH_URL_SUMMARY,
            "description": "Summarize the content of a web page and push the summary to the user.",
            "parameters": {
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "URL of the web page to summarize.",
                    },
                },
                "required": ["url"],
            },
        },
    },
]
