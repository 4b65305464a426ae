"""
Render-time content helpers.

Presentation concerns kept out of the orchestration core: stored content
is never rewritten, these helpers only shape API output.

Dependencies: json (stdlib)
System role: Display formatting for titles and assistant replies
"""

import json

SIDEBAR_TITLE_LENGTH = 30


def unwrap_assistant_content(role: str, content: str) -> str:
    """
    Extract the text of a JSON envelope reply.

    Webhook workflows often answer ``{"output": "..."}``. For assistant
    messages whose content parses to an object with a string ``output``,
    that string is shown; anything else is shown verbatim.

    Args:
        role: Message role
        content: Stored message content

    Returns:
        str: Content to display
    """
    if role != "assistant":
        return content
    try:
        parsed = json.loads(content)
    except (TypeError, ValueError):
        return content
    if isinstance(parsed, dict) and isinstance(parsed.get("output"), str):
        return parsed["output"]
    return content


def truncate_title(title: str, max_length: int = SIDEBAR_TITLE_LENGTH) -> str:
    """Shorten a session title for the session list, appending an ellipsis."""
    if len(title) > max_length:
        return title[:max_length] + "..."
    return title
