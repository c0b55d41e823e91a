"""PR 설명 생성 프롬프트"""

OPENAI_SYSTEM = (
    "You are a super assistant, very good at reviewing code, "
    "and can generate the best pull request descriptions."
)

GEMINI_SYSTEM = (
    "You are very good at reviewing code and can generate pull request descriptions."
)

DESCRIPTION_GENERATOR_HUMAN = """Instructions:
Please generate a Pull Request description for the provided diff, following these guidelines:
- Start with a subtitle "## What this PR does?".
- Format your response in Markdown.
- Exclude the PR title (e.g., "feat: xxx", "fix: xxx", "Refactor: xxx").
- Do not include the diff in the PR description.
- Provide a simple description of the changes.
- Avoid code snippets or images.
- Add some fun with emojis! Use only the following: 🚀🎉👍👏🔥. List changes using numbers, with a maximum of one emoji per item. Limit the total to 3 emojis. Example:
  1. Added a new feature👏
  2. Fixed a bug👍
  3. Major refactor🚀.
- Thank **{creator}** for the contribution! 🎉

Diff:
{diff}"""


def render_description_prompt(diff_text: str, creator: str | None) -> str:
    """diff와 PR 작성자로 생성 프롬프트 렌더링"""
    return DESCRIPTION_GENERATOR_HUMAN.format(
        creator=creator or "the author",
        diff=diff_text,
    )
