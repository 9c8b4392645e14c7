"""Prompts for the restaurant extract-then-evaluate pipeline."""

from __future__ import annotations

RESTAURANT_SEARCH_QUERY = (
    "Find detailed information about {restaurant_name} restaurant at {address}. "
    "Include details about their menu, cuisine style, atmosphere, and customer reviews."
)

# Placeholders: {restaurant_name}, {address}, {raw_info}, {chat_history}
RESTAURANT_EXTRACTION_PROMPT = """You summarize restaurant information gathered from the web. Extract these points:
1. Atmosphere: ambiance, decor and overall vibe.
2. Cuisine: the style of cuisine offered.
3. Menu: the key items on the menu.
4. Reviews: what customers and critics say.

Answer using exactly these tags:
<atmosphere>[summary]</atmosphere>
<cuisine>[summary]</cuisine>
<menu>[summary]</menu>
<reviews>[summary]</reviews>

Restaurant Name: {restaurant_name}
Address: {address}

Gathered information:
{raw_info}

Previous conversation:
{chat_history}
"""

# Placeholder: {context}, the full extraction output.
RESTAURANT_EVALUATION_PROMPT = """You are a gourmet consultant for a specialty cheese distributor. Below is a summary of a restaurant extracted from web sources.

Restaurant information:
{context}

Evaluate whether this restaurant is a good candidate for a specialty cheese program. Consider:
- Cuisine style and key ingredients: do its dishes pair well with specialty cheeses?
- High-end or specialty items: artisanal cheeses, imported charcuterie, truffle dishes and similar.
- Tone: does it emphasize premium, locally sourced or gourmet products?
- Overall fit, as a score from 1 to 10.

Answer in one sentence using this format:
"Based on [key findings], this restaurant has a [score] out of 10 likelihood of being a good fit for a specialty cheese program because [brief explanation]."
"""
