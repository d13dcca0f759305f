

class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation


# -----------------------------
# Parse-time errors (fatal to the formula)
# -----------------------------

class ParseError(MathError):
    pass

class TokenizerError(ParseError):
    """Unrecognized character; failure_idx points into the original input."""
    def __init__(self, failure_idx, equation=None):
        super().__init__(f"Failed to generate tokens at character {failure_idx}", code="3001", equation=equation)
        self.failure_idx = failure_idx

class ShuntingYardError(ParseError):
    pass

class MismatchedParens(ShuntingYardError):
    def __init__(self, message="Mismatched parentheses", equation=None):
        super().__init__(message, code="3002", equation=equation)

class TreeBuildError(ParseError):
    pass

class MissingLeftOperand(TreeBuildError):
    def __init__(self, equation=None):
        super().__init__("Missing left operand for binary operator", code="3003", equation=equation)

class MissingRightOperand(TreeBuildError):
    def __init__(self, equation=None):
        super().__init__("Missing right operand for binary operator", code="3004", equation=equation)

class MissingFunctionArg(TreeBuildError):
    def __init__(self, equation=None):
        super().__init__("Missing function argument", code="3005", equation=equation)

class RemainingNodes(TreeBuildError):
    def __init__(self, equation=None):
        super().__init__("Invalid expression: multiple nodes remain on stack", code="3006", equation=equation)

class EmptyExpression(TreeBuildError):
    def __init__(self, equation=None):
        super().__init__("Empty expression", code="3007", equation=equation)


# -----------------------------
# Evaluation-time errors (per sample, recoverable)
# -----------------------------

class EvalError(MathError):
    pass

class UndefinedVariable(EvalError):
    def __init__(self, name, equation=None):
        super().__init__(f"Undefined variable used: {name}", code="2001", equation=equation)
        self.name = name

class FunctionEvalError(EvalError):
    pass

class OutOfDomain(FunctionEvalError):
    def __init__(self, function, argument, equation=None):
        super().__init__(f"Argument {argument} was not in the domain of {function}", code="2002", equation=equation)
        self.function = function
        self.argument = argument

class BinaryOpError(EvalError):
    pass

class Div0(BinaryOpError):
    def __init__(self, equation=None):
        super().__init__("Divided by 0", code="2003", equation=equation)










Error_Dictionary= {

    "2" : "Evaluation Error",
    "3" : "Parse Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2001" : "Undefined variable.",
    "2002" : "Argument outside of the function domain.",
    "2003" : "Division by Zero",


    "3001" : "Invalid character in expression.",
    "3002" : "Mismatched parentheses.",
    "3003" : "Missing left operand.",
    "3004" : "Missing right operand.",
    "3005" : "Missing function argument.",
    "3006" : "Expression has disconnected parts.",
    "3007" : "Empty expression.",


    "4002" : "Graphing already Running!",
    "4003" : "Clipboard is empty.",


    "5001" : "Settings could not be loaded.",
    "5002" : "Not all Settings could be saved: ", # + Error raising setting
    "5003" : "Invalid graph settings.",



    "9999" : "Unexpected Error: " #+error
}


def category(code):
    """Return the main error category for a code (first digit)."""
    return Error_Dictionary.get(str(code)[:1], Error_Dictionary["9"])
