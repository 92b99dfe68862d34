import math

import pytest

from calculator import (
    Calculator,
    CalculatorState,
    INITIAL_STATE,
    Operator,
    ERROR,
    MAX_DISPLAY_LENGTH,
    evaluate,
    parse_display,
)


def press(calc, keys):
    """'12+3=' 같은 키 문자열을 순서대로 엔진에 입력한다. 'n'은 부호, 'b'는 지우기"""
    for k in keys:
        if k.isdigit():
            calc.input_digit(k)
        elif k == '.':
            calc.input_dot()
        elif k in '+-*/':
            calc.set_operator(k)
        elif k == '=':
            calc.equal()
        elif k == '%':
            calc.percent()
        elif k == 'n':
            calc.negative_positive()
        elif k == 'b':
            calc.backspace()
        elif k == 'c':
            calc.clear_entry()
        elif k == 'A':
            calc.reset()
        else:
            raise AssertionError('unknown key {!r}'.format(k))
    return calc.display_text()


@pytest.fixture
def calc():
    return Calculator()


def test_initial_state(calc):
    assert calc.state == INITIAL_STATE
    assert calc.display_text() == '0'
    assert calc.accumulator is None
    assert calc.pending_operator is None
    assert calc.state.awaiting_operand is False


# --- 숫자 입력 ---

@pytest.mark.parametrize('digits', ['7', '12345', '905', '123456789012345678'])
def test_digits_reconstruct_numeral(calc, digits):
    assert press(calc, digits) == digits


def test_leading_zero_is_replaced(calc):
    assert press(calc, '007') == '7'


def test_digit_input_is_capped(calc):
    press(calc, '1' * MAX_DISPLAY_LENGTH)
    assert press(calc, '9') == '1' * MAX_DISPLAY_LENGTH


def test_digit_rejects_non_digit(calc):
    with pytest.raises(ValueError):
        calc.input_digit('x')
    with pytest.raises(ValueError):
        calc.input_digit('12')


# --- 소수점 ---

def test_dot_on_zero(calc):
    assert press(calc, '.5') == '0.5'


def test_dot_is_idempotent(calc):
    assert press(calc, '1..2.') == '1.2'
    assert calc.state.last_action == 'dot'


def test_dot_after_operator_starts_new_operand(calc):
    assert press(calc, '3+.') == '0.'
    assert press(calc, '5=') == '3.5'


# --- 연산 ---

def test_left_to_right_without_precedence(calc):
    assert press(calc, '2+3*') == '5'
    assert press(calc, '4=') == '20'


def test_operator_substitution_does_not_recompute(calc):
    press(calc, '6+')
    press(calc, '-*')
    assert calc.accumulator == 6
    assert calc.pending_operator is Operator.MULTIPLY
    assert press(calc, '2=') == '12'


def test_operator_glyphs_are_accepted(calc):
    calc.input_digit('8')
    calc.set_operator('÷')
    calc.input_digit('2')
    calc.equal()
    assert calc.display_text() == '4'


def test_unknown_operator_raises(calc):
    with pytest.raises(ValueError):
        calc.set_operator('^')


def test_division_by_zero_is_error(calc):
    assert press(calc, '8/0=') == ERROR
    assert calc.accumulator is None
    assert calc.pending_operator is None


def test_division_by_zero_in_chain_is_error(calc):
    assert press(calc, '8/0+') == ERROR


def test_repeat_equals(calc):
    assert press(calc, '5+3=') == '8'
    assert calc.accumulator == 8
    assert press(calc, '=') == '11'
    assert press(calc, '=') == '14'


def test_equals_right_after_operator_repeats_accumulator(calc):
    assert press(calc, '5+=') == '10'
    assert press(calc, '=') == '15'


def test_equals_without_operation_is_noop(calc):
    assert press(calc, '42=') == '42'
    assert calc.state.accumulator is None


def test_repeat_equals_with_new_number(calc):
    press(calc, '2*3=')
    assert press(calc, '7=') == '21'


def test_new_number_after_equals_starts_new_chain(calc):
    press(calc, '2+3=')
    assert press(calc, '7*2=') == '14'


def test_operator_after_equals_continues_with_result(calc):
    press(calc, '2+3=')
    assert press(calc, '*4=') == '20'


def test_float_noise_is_hidden(calc):
    assert press(calc, '.1+.2=') == '0.3'


def test_overflow_is_error(calc):
    press(calc, '999999999*')
    for _ in range(40):
        press(calc, '=')
        if calc.display_text() == ERROR:
            break
    assert calc.display_text() == ERROR
    assert calc.accumulator is None


# --- 부호, 퍼센트, 지우기 ---

def test_toggle_sign(calc):
    assert press(calc, '12n') == '-12'
    assert press(calc, 'n') == '12'


def test_toggle_sign_on_zero(calc):
    assert press(calc, 'n') == '0'
    assert press(calc, '0.n') == '0.'


def test_toggle_sign_after_equals_carries_into_next_operation(calc):
    press(calc, '2+3=n')
    assert calc.display_text() == '-5'
    assert press(calc, '+1=') == '-4'


def test_toggle_sign_keeps_typed_text(calc):
    assert press(calc, '1.n') == '-1.'
    assert press(calc, '5') == '-1.5'


def test_toggle_sign_keeps_long_typed_number(calc):
    assert press(calc, '1234567890123n') == '-1234567890123'
    assert press(calc, '4') == '-12345678901234'


def test_toggle_sign_past_length_limit_reformats(calc):
    press(calc, '1' * MAX_DISPLAY_LENGTH)
    assert press(calc, 'n') == '-1.111111111e+17'


def test_digit_after_percent_exponent_starts_new_number(calc):
    assert press(calc, '1%%%%%') == '1e-10'
    assert press(calc, '5') == '5'


def test_digit_after_sign_on_exponent_starts_new_number(calc):
    assert press(calc, '1%%%%%n') == '-1e-10'
    assert press(calc, '4') == '4'


def test_backspace_on_exponent_clears_display(calc):
    assert press(calc, '1%%%%%b') == '0'


def test_percent(calc):
    assert press(calc, '50%') == '0.5'
    assert calc.state.awaiting_operand is False
    assert press(calc, '1') == '0.51'


def test_percent_as_right_operand(calc):
    assert press(calc, '200+5%=') == '200.05'


def test_backspace(calc):
    assert press(calc, '123b') == '12'
    assert press(calc, 'bb') == '0'
    assert press(calc, 'b') == '0'


def test_backspace_on_negative_single_digit(calc):
    assert press(calc, '5nb') == '0'


def test_backspace_never_leaves_negative_zero(calc):
    assert press(calc, '.5nb') == '0.'


def test_backspace_while_awaiting_operand_is_noop(calc):
    press(calc, '12+')
    assert press(calc, 'b') == '12'
    assert calc.state.awaiting_operand is True


def test_clear_entry_keeps_pending_operation(calc):
    press(calc, '9*4c')
    assert calc.display_text() == '0'
    assert calc.accumulator == 9
    assert calc.pending_operator is Operator.MULTIPLY
    assert press(calc, '2=') == '18'


@pytest.mark.parametrize('keys', ['', '12', '3+4', '3+4=', '1/0=', '.5n%', '7*='])
def test_clear_all_returns_initial_state(calc, keys):
    press(calc, keys)
    calc.reset()
    assert calc.state == INITIAL_STATE
    assert calc.display_text() == '0'
    assert calc.accumulator is None
    assert calc.pending_operator is None
    assert calc.state.awaiting_operand is False


# --- 오류 상태 ---

@pytest.fixture
def broken():
    calc = Calculator()
    press(calc, '1/0=')
    assert calc.display_text() == ERROR
    return calc


@pytest.mark.parametrize('keys', ['=', '%', 'n'])
def test_error_is_sticky(broken, keys):
    assert press(broken, keys) == ERROR
    assert broken.accumulator is None


def test_digit_after_error_starts_fresh(broken):
    assert press(broken, '7') == '7'
    assert broken.state == CalculatorState(display='7')


def test_dot_after_error_starts_fresh(broken):
    assert press(broken, '.') == '0.'


def test_operator_after_error_is_swallowed(broken):
    broken.set_operator('+')
    assert broken.state == INITIAL_STATE


def test_backspace_after_error_resets(broken):
    assert press(broken, 'b') == '0'
    assert broken.state == INITIAL_STATE


def test_unparsable_display_is_error():
    calc = Calculator(CalculatorState(display='1.2.3'))
    calc.set_operator('+')
    assert calc.display_text() == ERROR


# --- 보조 표시 ---

def test_pending_text(calc):
    assert calc.pending_text() == ''
    press(calc, '12*')
    assert calc.pending_text() == '12 ×'


# --- 순수 함수 ---

@pytest.mark.parametrize('a, b, op, expected', [
    (2, 3, Operator.ADD, 5),
    (2, 3, Operator.SUBTRACT, -1),
    (2, 3, Operator.MULTIPLY, 6),
    (3, 2, Operator.DIVIDE, 1.5),
    (-6, 3, '÷', -2),
])
def test_evaluate(a, b, op, expected):
    assert evaluate(a, b, op) == expected


def test_evaluate_division_by_zero_is_not_finite():
    assert math.isnan(evaluate(1, 0, Operator.DIVIDE))
    assert math.isnan(evaluate(0, 0, Operator.DIVIDE))


def test_evaluate_overflow_is_not_finite():
    assert not math.isfinite(evaluate(1e308, 10, Operator.MULTIPLY))


@pytest.mark.parametrize('text, expected', [('12', 12.0), ('-0.5', -0.5), ('3.', 3.0)])
def test_parse_display(text, expected):
    assert parse_display(text) == expected


def test_parse_display_error_is_nan():
    assert math.isnan(parse_display(ERROR))
