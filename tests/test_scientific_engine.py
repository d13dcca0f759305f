import math

import pytest

from Graphwars import ScientificEngine
from Graphwars import error as E


class TestFunctionTable:
    def test_get_func(self):
        assert ScientificEngine.get_func("sin(x)") == (ScientificEngine.SINE, 3)
        assert ScientificEngine.get_func("log10(x)") == (ScientificEngine.LOG10, 5)
        assert ScientificEngine.get_func("lnx") == (ScientificEngine.LN, 2)
        assert ScientificEngine.get_func("x") is None
        assert ScientificEngine.get_func("si") is None

    def test_functions_compare_by_name(self):
        assert ScientificEngine.SupportedFunction("sin", math.sin) == ScientificEngine.SINE
        assert ScientificEngine.SINE != ScientificEngine.SQRT
        assert len(set(ScientificEngine.FUNCTIONS)) == len(ScientificEngine.FUNCTIONS)

    def test_constants(self):
        assert dict(ScientificEngine.CONSTANTS) == {"e": math.e, "π": math.pi}


class TestRules:
    def test_exp_is_logistic(self):
        assert ScientificEngine.EXP.apply(0.0) == 0.5
        assert ScientificEngine.EXP.apply(-1000.0) == 1.0
        assert ScientificEngine.EXP.apply(1000.0) == 0.0

    def test_sine_of_infinity(self):
        assert math.isnan(ScientificEngine.SINE.apply(math.inf))
        assert math.isnan(ScientificEngine.SINE.apply(-math.inf))

    @pytest.mark.parametrize(
        "function,argument",
        [
            (ScientificEngine.LN, 0.0),
            (ScientificEngine.LN, -2.0),
            (ScientificEngine.LOG10, 0.0),
            (ScientificEngine.SQRT, -1e-9),
        ],
    )
    def test_out_of_domain(self, function, argument):
        with pytest.raises(E.OutOfDomain) as exc_info:
            function.apply(argument)
        assert exc_info.value.function == function.name
        assert exc_info.value.argument == argument

    def test_in_domain(self):
        assert ScientificEngine.LOG10.apply(1000.0) == pytest.approx(3.0)
        assert ScientificEngine.SQRT.apply(0.0) == 0.0
        assert ScientificEngine.LN.apply(math.e) == pytest.approx(1.0)
