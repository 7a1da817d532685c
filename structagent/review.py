"""Review the working tree changes before committing them."""
from __future__ import annotations

from .git import DiffSummary
from .llm import LLM

REVIEW_SYSTEM_PROMPT = "You are a senior software developer who has a knack for reviewing code."


def build_review_prompt(changes: str) -> str:
    return f"""Please review the following code changes:

```
{changes}
```

Assume deleted files are no longer needed. Avoid speculation and nitpicking. Focus on errors and potentially significant improvements.

Please ensure the code is clean and ready to commit. Commented out code and debug print statements must not be committed.

If you don't see any issues, you can simply respond with "LGTM!". Otherwise, respond with the issues you see.
"""


async def review_changes(llm: LLM, summary: DiffSummary, model: str) -> str:
    if not summary.changes.strip():
        return "LGTM! (no changes to review)"
    return await llm.generate_text(build_review_prompt(summary.changes), model, system_prompt=REVIEW_SYSTEM_PROMPT)
