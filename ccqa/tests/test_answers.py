import unittest

from ccqa.models import Question
from ccqa.parsers.answers import parse_answers_from_text, resolve_answers, tool_result_to_text


def _questions(*texts: str) -> list[Question]:
    return [Question(question=text) for text in texts]


class FreeTextAnswerParserTests(unittest.TestCase):
    def test_pairs_split_on_delimiter(self) -> None:
        answers = parse_answers_from_text('"Color?"="blue", "Size?"="large"', _questions("Color?", "Size?"))

        self.assertEqual(answers, {"Color?": "blue", "Size?": "large"})

    def test_single_answer_ends_at_last_quote(self) -> None:
        answers = parse_answers_from_text('"Color?"="blue and green"', _questions("Color?"))

        self.assertEqual(answers, {"Color?": "blue and green"})

    def test_unterminated_answer_runs_to_end_of_text(self) -> None:
        answers = parse_answers_from_text('"Color?"="blue and green', _questions("Color?"))

        self.assertEqual(answers, {"Color?": "blue and green"})

    def test_claude_code_result_sentence(self) -> None:
        text = (
            'User has answered your questions: "Which database?"="Postgres", '
            '"Add caching?"="Yes, with Redis". You can now continue with the user\'s answers in mind.'
        )

        answers = parse_answers_from_text(text, _questions("Which database?", "Add caching?"))

        self.assertEqual(answers["Which database?"], "Postgres")
        self.assertEqual(answers["Add caching?"], "Yes, with Redis")

    def test_missing_questions_are_omitted(self) -> None:
        answers = parse_answers_from_text('"Color?"="blue"', _questions("Color?", "Size?", ""))

        self.assertEqual(answers, {"Color?": "blue"})

    def test_embedded_delimiter_truncates_answer(self) -> None:
        answers = parse_answers_from_text('"Note?"="say "hi", "bye""', _questions("Note?"))

        self.assertEqual(answers, {"Note?": 'say "hi'})

    def test_non_text_input_yields_nothing(self) -> None:
        self.assertEqual(parse_answers_from_text("", _questions("Color?")), {})
        self.assertEqual(parse_answers_from_text(None, _questions("Color?")), {})


class ResolveAnswersTests(unittest.TestCase):
    def test_structured_answers_are_authoritative(self) -> None:
        answers = resolve_answers(
            {"answers": {"Proceed?": "Yes"}},
            '"Proceed?"="No"',
            _questions("Proceed?"),
        )

        self.assertEqual(answers, {"Proceed?": "Yes"})

    def test_structured_values_are_coerced_to_strings(self) -> None:
        answers = resolve_answers({"answers": {"Count?": 3}}, None, _questions("Count?"))

        self.assertEqual(answers, {"Count?": "3"})

    def test_multi_select_list_is_joined(self) -> None:
        answers = resolve_answers({"answers": {"Features?": ["Auth", "Search"]}}, None, _questions("Features?"))

        self.assertEqual(answers, {"Features?": "Auth, Search"})

    def test_falls_back_to_text_when_side_channel_lacks_answers(self) -> None:
        for side_channel in (None, "Error: rejected", {"questions": []}):
            with self.subTest(side_channel=side_channel):
                answers = resolve_answers(side_channel, '"Proceed?"="Yes"', _questions("Proceed?"))
                self.assertEqual(answers, {"Proceed?": "Yes"})

    def test_text_blocks_are_flattened_before_parsing(self) -> None:
        content = [{"type": "text", "text": '"Proceed?"="No"'}]

        self.assertEqual(tool_result_to_text(content), '"Proceed?"="No"')
        self.assertEqual(resolve_answers(None, content, _questions("Proceed?")), {"Proceed?": "No"})


if __name__ == "__main__":
    unittest.main()
