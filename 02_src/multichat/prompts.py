"""Fixed prompt fragments used when building protocol conversations."""

# Content of the tool result synthesized for a tool call that never got one
TOOL_CALL_INTERRUPTED_MESSAGE = (
    "Tool call was interrupted before it returned a result. "
    "The user may have stopped the response."
)

SYNTHESIS_INTERJECTION = """\
Several assistants have answered my last message. Their answers follow, each \
wrapped in a <perspective> tag naming the model that wrote it.

Write a single answer that combines the strongest parts of every perspective. \
Resolve disagreements explicitly, drop anything that is wrong or redundant, and \
do not mention the perspectives or their senders in your answer."""
