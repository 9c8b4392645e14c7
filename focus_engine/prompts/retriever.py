"""Query-formulation prompt shared by the searching focus modes.

Placeholders: ``{chat_history}``, ``{query}``.
"""

from __future__ import annotations


def make_retriever_prompt(focus: str, example_question: str, example_rephrase: str) -> str:
    return f"""You will be given a conversation and a follow-up question. Rephrase the follow-up question so it is a standalone {focus} search query.
If the question is a greeting or a writing task that needs no search, reply with <question>not_needed</question>.
If the user asks about specific web pages, put their URLs one per line inside a <links> block and the request inside the <question> block.
You may give up to three alternative queries, one per line, inside the <question> block.

Example:
Follow up question: {example_question}
Rephrased question:
<question>
{example_rephrase}
</question>

Conversation:
{{chat_history}}

Follow up question: {{query}}
Rephrased question:
"""
