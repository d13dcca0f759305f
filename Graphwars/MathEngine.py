# MathEngine.py
"""""
Core expression engine for the Graphwars grapher.

Pipeline
--------
1) Tokenizer: converts a raw input string into a flat list of tokens.
2) Normalizer: rewrites unary minus and inserts implicit multiplication.
3) Shunting-yard: reorders the infix tokens into postfix (RPN).
4) Tree builder: turns the RPN stream into an expression tree.
5) Evaluator / Binder: evaluates the tree against (name, value) pairs and binds
   one free variable so the curve can be sampled many times without reparsing.

All values are Python floats (64-bit). Overflow therefore sets in later than
with 32-bit floats: 10^39 is still finite here.
"""""

from dataclasses import dataclass
import math

from . import ScientificEngine
from . import error as E

# Debug toggle for optional prints in this module (driven by the "debug" setting)
debug = False

# Token kinds
PAREN_OPEN = "PAREN_OPEN"
PAREN_CLOSE = "PAREN_CLOSE"
FUNCTION = "FUNCTION"
VARIABLE = "VARIABLE"
OPERATOR = "OPERATOR"
LITERAL = "LITERAL"

# Supported operators (kept as a simple list for quick membership checks)
Operations = ["+", "-", "*", "/", "^"]

# Juxtaposition, e.g. '2x' or '(x+1)(x-1)'. Never produced by the tokenizer.
IMPLICIT_MULTIPLY = "·"

# operator -> (precedence, right associative)
OPERATOR_TABLE = {
    "+": (1, False),
    "-": (1, False),
    "*": (2, False),
    "/": (2, False),
    IMPLICIT_MULTIPLY: (3, False),
    "^": (5, True),
}


# -----------------------------
# Tokens
# -----------------------------

@dataclass(frozen=True)
class Token:
    kind: str
    value: object = None

    def __repr__(self):
        if self.value is None:
            return f"Token({self.kind})"
        return f"Token({self.kind}, {self.value!r})"


# -----------------------------
# AST node types
# -----------------------------

class Number:
    """AST node for a numeric literal."""
    def __init__(self, value):
        self.value = float(value)

    def evaluate(self, variables):
        return self.value

    def __eq__(self, other):
        return isinstance(other, Number) and self.value == other.value

    def __repr__(self):
        return f"Number({self.value})"


class Variable:
    """AST node for a single-letter variable, resolved at evaluation time."""
    def __init__(self, name):
        self.name = name

    def evaluate(self, variables):
        """Return the first value bound to this name (front-to-back scan)."""
        for name, value in variables:
            if name == self.name:
                return value
        raise E.UndefinedVariable(self.name)

    def __eq__(self, other):
        return isinstance(other, Variable) and self.name == other.name

    def __repr__(self):
        return f"Variable('{self.name}')"


class BinOp:
    """AST node for a binary operation: left <operator> right."""
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def evaluate(self, variables):
        return evaluate_tree(self, variables)

    def apply(self, left_value, right_value):
        """Apply the binary operator to two already evaluated operands."""
        if self.operator == '+':
            return left_value + right_value
        elif self.operator == '-':
            return left_value - right_value
        elif self.operator == '*':
            return left_value * right_value
        elif self.operator == '^':
            return power(left_value, right_value)
        elif self.operator == '/':
            if right_value == 0:
                raise E.Div0()
            return left_value / right_value
        else:
            raise E.MathError(f"Unknown operator: {self.operator}", code="9999")

    def __eq__(self, other):
        return (isinstance(other, BinOp) and self.operator == other.operator
                and self.left == other.left and self.right == other.right)

    def __repr__(self):
        return f"BinOp({self.operator!r}, left={self.left}, right={self.right})"


class FunctionCall:
    """AST node for a single-argument function from the ScientificEngine table."""
    def __init__(self, function, argument):
        self.function = function
        self.argument = argument

    def evaluate(self, variables):
        return evaluate_tree(self, variables)

    def __eq__(self, other):
        return (isinstance(other, FunctionCall) and self.function == other.function
                and self.argument == other.argument)

    def __repr__(self):
        return f"FunctionCall({self.function.name!r}, {self.argument})"


def evaluate_tree(root, variables):
    """Post-order walk with an explicit operand stack.

    Long chains like x+x+...+x build trees far deeper than the interpreter's
    recursion limit, so the walk never recurses. Left operands are evaluated
    before right ones.
    """
    values = []
    pending = [(root, False)]
    while pending:
        node, children_done = pending.pop()
        if isinstance(node, BinOp):
            if children_done:
                right_value = values.pop()
                left_value = values.pop()
                values.append(node.apply(left_value, right_value))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        elif isinstance(node, FunctionCall):
            if children_done:
                values.append(node.function.apply(values.pop()))
            else:
                pending.append((node, True))
                pending.append((node.argument, False))
        else:
            values.append(node.evaluate(variables))
    return values[0]


def _is_odd_integer(value):
    return math.isfinite(value) and value == int(value) and int(value) % 2 == 1


def power(basis, exponent):
    """IEEE-style pow: out-of-domain combinations give NaN/inf instead of raising."""
    try:
        return math.pow(basis, exponent)
    except OverflowError:
        if basis < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if basis == 0:
            # 0 ^ negative
            if math.copysign(1.0, basis) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        # negative base with a fractional exponent
        return math.nan


# -----------------------------
# Tokenizer
# -----------------------------

def read_literal(problem, b):
    """Read a decimal literal starting at index b.

    Digits and at most one '.'; the literal has to start with a digit.
    Returns (value, length) or None.
    """
    if not problem[b].isdigit():
        return None
    str_number = ""
    hat_schon_komma = False  # Only one dot allowed in a numeric literal
    while b < len(problem):
        if problem[b].isdigit():
            str_number += problem[b]
        elif problem[b] == "." and not hat_schon_komma:
            hat_schon_komma = True
            str_number += problem[b]
        else:
            break
        b += 1
    try:
        return float(str_number), len(str_number)
    except ValueError:
        return None


def tokenize(problem):
    """Convert a raw input string into infix tokens.

    Whitespace is removed first. At each position the function table is tried,
    then a single letter, a number, an operator and finally a parenthesis.
    Raises TokenizerError with the index of the offending character in `problem`.
    """
    # Index of every non-whitespace character in the original string
    positions = [i for i, char in enumerate(problem) if not char.isspace()]
    expression = "".join(problem[i] for i in positions)

    tokens = []
    b = 0
    while b < len(expression):
        current_char = expression[b]
        function_match = ScientificEngine.get_func(expression[b:])
        literal_match = read_literal(expression, b)

        if function_match is not None:
            function, length = function_match
            tokens.append(Token(FUNCTION, function))
            b += length
        elif current_char.isalpha():
            tokens.append(Token(VARIABLE, current_char))
            b += 1
        elif literal_match is not None:
            value, length = literal_match
            tokens.append(Token(LITERAL, value))
            b += length
        elif current_char in Operations:
            tokens.append(Token(OPERATOR, current_char))
            b += 1
        elif current_char == "(":
            tokens.append(Token(PAREN_OPEN))
            b += 1
        elif current_char == ")":
            tokens.append(Token(PAREN_CLOSE))
            b += 1
        else:
            raise E.TokenizerError(positions[b])

    return tokens


# -----------------------------
# Infix normalizer
# -----------------------------

def perform_unary_minus(tokens):
    """Rewrite every unary '-' as the literal -1 followed by an implicit multiply.

    A '-' is unary when it starts the expression or follows an operator or '('.
    """
    ergebnis = []
    unary_possible = True
    for token in tokens:
        if unary_possible and token.kind == OPERATOR and token.value == "-":
            ergebnis.append(Token(LITERAL, -1.0))
            ergebnis.append(Token(OPERATOR, IMPLICIT_MULTIPLY))
        else:
            ergebnis.append(token)
        unary_possible = token.kind in (OPERATOR, PAREN_OPEN)
    return ergebnis


def insert_implicit_multiplication(tokens):
    """Insert IMPLICIT_MULTIPLY between juxtaposed operands.

    number/variable/')' followed by number/variable/'('/function name.
    """
    output = []
    for token in tokens:
        if (output and output[-1].kind in (VARIABLE, PAREN_CLOSE, LITERAL)
                and token.kind in (LITERAL, PAREN_OPEN, VARIABLE, FUNCTION)):
            output.append(Token(OPERATOR, IMPLICIT_MULTIPLY))
        output.append(token)
    return output


def normalize(tokens):
    return insert_implicit_multiplication(perform_unary_minus(tokens))


# -----------------------------
# Shunting-yard (infix -> RPN)
# -----------------------------

def _emit(token):
    # Implicit multiply is an ordinary '*' once precedence is resolved
    if token.kind == OPERATOR and token.value == IMPLICIT_MULTIPLY:
        return Token(OPERATOR, "*")
    return token


def shunting_yard(tokens):
    """Reorder normalized infix tokens into RPN.

    Functions wait on the operator stack until the ')' closing their argument.
    A function name without parentheses applies to the rest of its group.
    """
    output = []
    opstack = []

    for token in tokens:
        if token.kind in (LITERAL, VARIABLE):
            output.append(token)

        elif token.kind in (FUNCTION, PAREN_OPEN):
            opstack.append(token)

        elif token.kind == OPERATOR:
            precedence, right_associative = OPERATOR_TABLE[token.value]
            while opstack and opstack[-1].kind == OPERATOR:
                top_precedence = OPERATOR_TABLE[opstack[-1].value][0]
                if top_precedence > precedence or (top_precedence == precedence and not right_associative):
                    output.append(_emit(opstack.pop()))
                else:
                    break
            opstack.append(token)

        elif token.kind == PAREN_CLOSE:
            while True:
                if not opstack:
                    raise E.MismatchedParens("Missing '('")
                top = opstack.pop()
                if top.kind == PAREN_OPEN:
                    break
                output.append(_emit(top))
            if opstack and opstack[-1].kind == FUNCTION:
                output.append(opstack.pop())

    while opstack:
        top = opstack.pop()
        if top.kind == PAREN_OPEN:
            raise E.MismatchedParens("Missing ')'")
        output.append(_emit(top))

    return output


# -----------------------------
# Tree builder (RPN -> AST)
# -----------------------------

def build_expression_tree(rpn_tokens):
    """Consume RPN tokens with a node stack; exactly one root must remain."""
    stack = []
    for token in rpn_tokens:
        if token.kind == LITERAL:
            node = Number(token.value)
        elif token.kind == VARIABLE:
            node = Variable(token.value)
        elif token.kind == FUNCTION:
            if not stack:
                raise E.MissingFunctionArg()
            node = FunctionCall(token.value, stack.pop())
        else:
            if not stack:
                raise E.MissingRightOperand()
            right = stack.pop()
            if not stack:
                raise E.MissingLeftOperand()
            left = stack.pop()
            node = BinOp(left, token.value, right)
        stack.append(node)

    if len(stack) > 1:
        raise E.RemainingNodes()
    if not stack:
        raise E.EmptyExpression()
    return stack[0]


# -----------------------------
# Parsed functions and binding
# -----------------------------

class BoundFunction:
    """A parsed expression with one free variable, callable as f(value).

    Holds the tree and a snapshot of the bound constants; nothing is mutated
    during evaluation, so one instance can be shared between threads.
    """
    def __init__(self, tree, bound_vars, var_name):
        self.tree = tree
        self.bound_vars = tuple(bound_vars)
        self.var_name = str(var_name)

    def evaluate_at(self, value):
        # Call-time binding goes last: an earlier constant with the same name wins
        return self.tree.evaluate(self.bound_vars + ((self.var_name, float(value)),))

    def __call__(self, value):
        return self.evaluate_at(value)

    def __repr__(self):
        return f"BoundFunction({self.var_name!r}, tree={self.tree})"


class ParsedFunction:
    """Expression tree plus its ordered list of bound (name, value) constants."""
    def __init__(self, tree, bound_vars=()):
        self.tree = tree
        self.bound_vars = tuple(bound_vars)

    @classmethod
    def from_string(cls, problem):
        return parse(problem)

    def add_var(self, name, value):
        """Return a copy with (name, value) appended; identical pairs are not added twice."""
        binding = (str(name), value)
        if binding in self.bound_vars:
            return self
        return ParsedFunction(self.tree, self.bound_vars + (binding,))

    def with_constants(self, pairs):
        parsed = self
        for name, value in pairs:
            parsed = parsed.add_var(name, value)
        return parsed

    def evaluate(self, variables=()):
        return self.tree.evaluate(self.bound_vars + tuple(variables))

    def bind(self, var_name):
        return BoundFunction(self.tree, self.bound_vars, var_name)

    def __repr__(self):
        return f"ParsedFunction(tree={self.tree}, bound_vars={list(self.bound_vars)})"


# -----------------------------
# Public entry points
# -----------------------------

def parse(problem):
    """Main API: tokenize → normalize → shunting-yard → tree. Never returns a partial result."""
    try:
        tokens = tokenize(problem)
        normalized = normalize(tokens)
        rpn = shunting_yard(normalized)
        finaler_baum = build_expression_tree(rpn)

    # Re-raise our parse errors after attaching the source equation
    except E.ParseError as e:
        e.equation = problem
        raise e

    if debug == True:
        print("Tokens: " + str(normalized))
        print("RPN: " + str(rpn))
        print("Final AST:")
        print(finaler_baum)

    return ParsedFunction(finaler_baum)


def calculate(problem, x=0.0):
    """One-shot helper: parse, add e and π, bind 'x' and evaluate at x."""
    try:
        function = parse(problem).with_constants(ScientificEngine.CONSTANTS).bind("x")
        return function(x)
    except E.MathError as e:
        e.equation = problem
        raise e
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        raise E.MathError(message=str(e).strip(), code="9999", equation=problem)


def test_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the problem: ")
    problem = input()
    print("Enter x: ")
    x = float(input() or 0)
    print(calculate(problem, x))


if __name__ == "__main__":
    # Allow running this module directly for quick CLI tests:
    #   python -m Graphwars.MathEngine
    test_main()
