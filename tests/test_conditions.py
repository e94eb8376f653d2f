"""Tests for condition splitting, parsing and evaluation."""

import pytest

from liquid_core import (
    Condition,
    ConditionError,
    ConditionInterpreter,
    ConditionParser,
    ConditionSplitter,
    LiquidSyntaxError,
    LogicalEvaluator,
    LogicalOperator,
    is_truthy,
)

AND = LogicalOperator.AND
OR = LogicalOperator.OR


def evaluate(truths, connectives):
    """Evaluate literal truth values with the given connectives."""
    conditions = [Condition(left="true" if t else "false") for t in truths]
    return LogicalEvaluator.evaluate(conditions, connectives, lambda c: c.left == "true")


class TestConditionSplitter:
    """Splitting expressions on and/or."""

    def test_single_condition(self):
        """One fragment gets the synthetic leading AND."""
        fragments, connectives = ConditionSplitter().split("a == 1")
        assert fragments == ["a == 1"]
        assert connectives == [AND]

    def test_mixed_connectives(self):
        """Fragments and connectives stay index-aligned."""
        fragments, connectives = ConditionSplitter().split("a == '1' and b contains 'x' or c")
        assert fragments == ["a == '1'", "b contains 'x'", "c"]
        assert connectives == [AND, AND, OR]

    def test_keywords_in_quotes_do_not_split(self):
        """A quoted ' and ' is part of the operand."""
        fragments, connectives = ConditionSplitter().split("title == 'salt and pepper'")
        assert fragments == ["title == 'salt and pepper'"]
        assert connectives == [AND]

    def test_words_containing_keywords_do_not_split(self):
        """Only whole words split."""
        fragments, _ = ConditionSplitter().split("android or brand")
        assert fragments == ["android", "brand"]

    def test_connectives_without_spaces(self):
        """Connectives split next to quoted operands even without whitespace."""
        fragments, connectives = ConditionSplitter().split("a=='x'and b")
        assert fragments == ["a=='x'", "b"]
        assert connectives == [AND, AND]

    def test_empty_expression(self):
        """Empty expression is a syntax error."""
        with pytest.raises(LiquidSyntaxError):
            ConditionSplitter().split("   ")

    def test_dangling_connective_gives_empty_fragment(self):
        """A trailing connective leaves an empty fragment for the parser to reject."""
        fragments, connectives = ConditionSplitter().split("a and")
        assert fragments == ["a", ""]
        assert connectives == [AND, AND]


class TestConditionParser:
    """Parsing one fragment."""

    def test_truthiness_test(self):
        """A bare operand has no operator and no right side."""
        assert ConditionParser().parse("user.admin") == Condition(left="user.admin")

    def test_comparison(self):
        """Operands are kept unresolved."""
        condition = ConditionParser().parse("user.name != 'Bob'")
        assert condition == Condition(left="user.name", operator="!=", right="'Bob'")

    def test_contains(self):
        """contains is accepted as an operator."""
        condition = ConditionParser().parse("tags contains 'red'")
        assert condition.operator == "contains"

    def test_empty_fragment(self):
        """A fragment without an operand fails."""
        with pytest.raises(LiquidSyntaxError, match="Syntax Error in tag 'unless'"):
            ConditionParser().parse("")

    def test_missing_right_operand(self):
        """An operator always has a right operand."""
        with pytest.raises(LiquidSyntaxError):
            ConditionParser().parse("a ==")

    def test_unknown_operator(self):
        """Unknown word operators fail at parse time."""
        with pytest.raises(LiquidSyntaxError, match="Unknown operator 'startswith'"):
            ConditionParser().parse("a startswith 'x'")

    def test_trailing_tokens(self):
        """Extra tokens after a condition fail."""
        with pytest.raises(LiquidSyntaxError):
            ConditionParser().parse("a == b c")

    def test_operand_cannot_be_separator(self):
        """A separator is not an operand."""
        with pytest.raises(LiquidSyntaxError):
            ConditionParser().parse("| a")

    def test_tag_name_in_message(self):
        """The message names the tag the parser was built for."""
        with pytest.raises(LiquidSyntaxError, match="tag 'if'"):
            ConditionParser("if").parse("")

    def test_parse_expression(self):
        """Split and parse in one step."""
        conditions, connectives = ConditionParser().parse_expression("a or b == 2")
        assert conditions == [Condition("a"), Condition("b", "==", "2")]
        assert connectives == [AND, OR]


class TestLogicalEvaluator:
    """AND-before-OR grouping."""

    @pytest.mark.parametrize("truths", [
        [True], [False], [True, True, True], [True, False, True], [False, False],
    ])
    def test_all_and_is_conjunction(self, truths):
        """With only AND the result is the conjunction."""
        assert evaluate(truths, [AND] * len(truths)) == all(truths)

    @pytest.mark.parametrize("left,right", [
        (True, True), (True, False), (False, True), (False, False),
    ])
    def test_single_or_is_disjunction(self, left, right):
        """Two conditions joined by or."""
        assert evaluate([left, right], [AND, OR]) == (left or right)

    def test_and_binds_tighter_than_or(self):
        """a or b and c is a OR (b AND c)."""
        # (a OR b) AND c would be False here
        assert evaluate([True, False, False], [AND, OR, AND]) is True
        assert evaluate([False, True, True], [AND, OR, AND]) is True
        assert evaluate([False, True, False], [AND, OR, AND]) is False

    def test_every_condition_is_interpreted(self):
        """No short-circuit: all conditions are interpreted in order."""
        seen = []
        conditions = [Condition("a"), Condition("b"), Condition("c")]

        def interpret(condition):
            seen.append(condition.left)
            return False

        LogicalEvaluator.evaluate(conditions, [AND, AND, OR], interpret)
        assert seen == ["a", "b", "c"]

    def test_uses_truthiness_policy(self):
        """0 and empty string count as true."""
        conditions = [Condition("x"), Condition("y")]
        values = iter([0, ""])
        assert LogicalEvaluator.evaluate(conditions, [AND, AND], lambda c: next(values)) is True

    def test_mismatched_lengths(self):
        """Sequences must align."""
        with pytest.raises(ValueError):
            LogicalEvaluator.evaluate([Condition("a")], [AND, OR], lambda c: True)
        with pytest.raises(ValueError):
            LogicalEvaluator.evaluate([], [], lambda c: True)


class TestTruthiness:
    """Template truthiness."""

    @pytest.mark.parametrize("value", [0, "", [], {}, "false", 0.0, True])
    def test_truthy(self, value):
        assert is_truthy(value) is True

    @pytest.mark.parametrize("value", [False, None])
    def test_falsy(self, value):
        assert is_truthy(value) is False


class TestConditionInterpreter:
    """Operand resolution and comparison."""

    @pytest.mark.parametrize("left,op,right,expected", [
        ("name", "==", "'Alice'", True),
        ("name", "!=", "'Alice'", False),
        ("name", "<>", "'Bob'", True),
        ("count", "<", "1", True),
        ("count", ">", "1", False),
        ("ratio", ">=", "3.5", True),
        ("ratio", "<=", "3", False),
        ("tags", "contains", "'red'", True),
        ("tags", "contains", "'pink'", False),
        ("name", "contains", "'lic'", True),
        ("user", "contains", "'admin'", True),
        ("missing", "<", "1", False),
        ("nothing", "==", "nil", True),
    ])
    def test_comparisons(self, context, left, op, right, expected):
        interpreter = ConditionInterpreter()
        assert interpreter.interpret_condition(left, right, op, context) is expected

    def test_no_operator_returns_value(self, context):
        """Without an operator the resolved value comes back unchanged."""
        assert ConditionInterpreter().interpret(Condition("tags"), context) == ["red", "green", "blue"]

    def test_incomparable_types(self, context):
        """Ordering a string against a number fails."""
        with pytest.raises(ConditionError):
            ConditionInterpreter().interpret(Condition("name", "<", "1"), context)
