"""Answer-generation prompts.

Placeholders: ``{context}``, ``{chat_history}``, ``{query}``, ``{date}``.
"""

from __future__ import annotations


def make_response_prompt(persona: str, guidance: str) -> str:
    return f"""You are {persona}.
{guidance}
Cite the numbered context entries you rely on as [number] at the end of the sentence that uses them.
If the context does not contain the answer, say so rather than guessing.

<context>
{{context}}
</context>

Conversation so far:
{{chat_history}}

Current date: {{date}}

User question: {{query}}
"""


WRITING_ASSISTANT_PROMPT = """You are a writing assistant. Help the user with their writing task; no web search was performed.
If the user asks for facts you cannot verify, suggest switching to a search focus mode.

<context>
{context}
</context>

Conversation so far:
{chat_history}

Current date: {date}

User request: {query}
"""

SUMMARIZER_PROMPT = """Summarize the following web page so it can answer the question below. Keep facts, names and numbers; drop navigation and boilerplate.

Question: {query}

Page ({url}):
{content}

Summary:
"""
