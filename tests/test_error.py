import pytest

from Graphwars import error as E


PARSE_ERRORS = [
    E.TokenizerError(4),
    E.MismatchedParens(),
    E.MissingLeftOperand(),
    E.MissingRightOperand(),
    E.MissingFunctionArg(),
    E.RemainingNodes(),
    E.EmptyExpression(),
]

EVAL_ERRORS = [
    E.UndefinedVariable("y"),
    E.OutOfDomain("ln", -1.0),
    E.Div0(),
]


@pytest.mark.parametrize("error", PARSE_ERRORS)
def test_parse_errors(error):
    assert isinstance(error, E.ParseError)
    assert not isinstance(error, E.EvalError)
    assert error.code in E.ERROR_MESSAGES
    assert E.category(error.code) == "Parse Error"


@pytest.mark.parametrize("error", EVAL_ERRORS)
def test_eval_errors(error):
    assert isinstance(error, E.EvalError)
    assert not isinstance(error, E.ParseError)
    assert error.code in E.ERROR_MESSAGES
    assert E.category(error.code) == "Evaluation Error"


def test_intermediate_classes():
    assert isinstance(E.MismatchedParens(), E.ShuntingYardError)
    assert isinstance(E.EmptyExpression(), E.TreeBuildError)
    assert isinstance(E.OutOfDomain("sqrt", -2.0), E.FunctionEvalError)
    assert isinstance(E.Div0(), E.BinaryOpError)


def test_payloads():
    tokenizer_error = E.TokenizerError(7, equation="2x+$")
    assert tokenizer_error.failure_idx == 7
    assert tokenizer_error.equation == "2x+$"

    domain_error = E.OutOfDomain("ln", 0.0)
    assert domain_error.function == "ln"
    assert domain_error.argument == 0.0
    assert "ln" in str(domain_error)


def test_category():
    assert E.category("5003") == "Configuration Error"
    assert E.category(9999) == "Runtime Error"
    assert E.category("7000") == "Runtime Error"
