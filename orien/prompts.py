"""LLM prompts for Orien agents."""


class Prompt:
    """All LLM prompts for Orien agents."""

    # Instructions appended after the <tools> block for tag-style model families
    TAGGED_TOOLS_INSTRUCTIONS = (
        "You can call the tools listed above. To call a tool, respond with exactly one "
        "block in this format:\n"
        '<tool_call>{"name": "<tool name>", "arguments": {<arguments as JSON>}}</tool_call>\n'
        "Emit one <tool_call> block per invocation. "
        "Stop generating immediately after the closing </tool_call> tag. "
        "Do not describe the call and do not continue the conversation after it."
    )

    # Wrapper for a tool result fed back to a tag-style model
    TAGGED_TOOL_RESPONSE = "<tool_response>{result}</tool_response>"

    # Annotation appended to the last user message
    CURRENT_TIME_ANNOTATION = "[Current time: {now}]"

    # Default autonomy prompt; personas may override it with their own template
    DEFAULT_WAKEUP_PROMPT = (
        "This is an autonomous check-in, not a message from the user. "
        "Time since the user was last active: {hours_since_activity} (online: {is_online}). "
        "Decide whether you want to reach out. If you do, use send_notification. "
        "Use it sparingly and only when you genuinely want to check in."
    )
