"""
Unit tests for fenced-code extraction from model replies.
"""

from figma2jsx.core.code_extractor import extract_code


class TestExtractCode:
    def test_jsx_fence_returns_interior(self) -> None:
        assert extract_code("```jsx\nCODE\n```") == "CODE"

    def test_plain_text_is_returned_unchanged(self) -> None:
        assert extract_code("plain text, no fence") == "plain text, no fence"

    def test_plain_text_is_trimmed(self) -> None:
        assert extract_code("\n  <div />  \n") == "<div />"

    def test_fence_without_language_tag(self) -> None:
        assert extract_code("```\nconst a = 1;\n```") == "const a = 1;"

    def test_other_language_tags_are_dropped(self) -> None:
        assert extract_code("```html\n<p>Hi</p>\n```") == "<p>Hi</p>"
        assert extract_code("```tsx\nexport default App;\n```") == "export default App;"

    def test_surrounding_prose_is_discarded(self) -> None:
        text = (
            "Here is your component:\n\n"
            "```jsx\n"
            "export default function Card() {\n"
            "  return <div className=\"p-4\">Hi</div>;\n"
            "}\n"
            "```\n\n"
            "Let me know if you need changes."
        )

        assert extract_code(text) == (
            "export default function Card() {\n"
            "  return <div className=\"p-4\">Hi</div>;\n"
            "}"
        )

    def test_first_fence_wins(self) -> None:
        text = "```jsx\nFIRST\n```\nand\n```css\nSECOND\n```"
        assert extract_code(text) == "FIRST"

    def test_code_on_opening_line_is_kept(self) -> None:
        assert extract_code("```const x = 1;\nconst y = 2;\n```") == "const x = 1;\nconst y = 2;"

    def test_unclosed_fence_falls_back_to_full_text(self) -> None:
        assert extract_code("  ```jsx\n<div />  ") == "```jsx\n<div />"

    def test_empty_and_none_input(self) -> None:
        assert extract_code("") == ""
        assert extract_code(None) == ""

    def test_empty_block(self) -> None:
        assert extract_code("```jsx\n```") == ""
