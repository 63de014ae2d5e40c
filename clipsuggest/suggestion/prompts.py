SYSTEM_PROMPT = (
    "You are a video editor's assistant. You read excerpts of a video transcript "
    "and find the moments that match what the editor is looking for.\n\n"
    "Each transcript line has the form `[start=<seconds> end=<seconds>] text`.\n\n"
    "Rules:\n"
    "- Only report moments clearly supported by the excerpt.\n"
    "- start_time and end_time MUST be copied from the line markers, in seconds.\n"
    "- A match may span several consecutive lines.\n"
    "- Assign a confidence score between 0 and 1 to each match.\n"
    "- Keep each reason to one short sentence.\n"
    "- Return an empty list when nothing matches."
)

USER_PROMPT_TEMPLATE = """Find the moments in this transcript excerpt that match: {prompt}

Transcript excerpt:
{window_text}"""

MATCHES_SCHEMA = {
    "type": "object",
    "properties": {
        "matches": {
            "type": "array",
            "description": "Transcript ranges matching the request.",
            "items": {
                "type": "object",
                "properties": {
                    "start_time": {
                        "type": "number",
                        "description": "Start marker of the first matching line, in seconds.",
                    },
                    "end_time": {
                        "type": "number",
                        "description": "End marker of the last matching line, in seconds.",
                    },
                    "confidence": {
                        "type": "number",
                        "description": "Confidence score 0-1.",
                    },
                    "reason": {
                        "type": "string",
                        "description": "Why this range matches the request.",
                    },
                },
                "required": ["start_time", "end_time", "confidence", "reason"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["matches"],
    "additionalProperties": False,
}
