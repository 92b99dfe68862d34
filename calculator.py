# calculator.py
# Python 3.x, 표준 라이브러리만 사용 (UI는 calculator_window.py)
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

import logging
import math
import re
import string
from dataclasses import dataclass, field, replace
from decimal import Decimal, localcontext, ROUND_HALF_UP
from enum import Enum
from typing import Optional

logger = logging.getLogger('calculator')

ERROR = 'Error'
MAX_DISPLAY_LENGTH = 18  # 입력으로 만들 수 있는 최대 표시 길이(부호, 소수점 포함)

# 표시 포맷 정책
EXPONENT_UPPER = 1e12  # 이 값 이상은 지수 표기
EXPONENT_LOWER = 1e-9  # 0이 아니면서 이 값 미만도 지수 표기
SIGNIFICANT_DIGITS = 10  # 지수 표기의 유효 자릿수
NOISE_DIGITS = 15  # float 잡음 제거용 유효 자릿수
DECIMAL_PLACES = 12  # 일반 표기의 최대 소수 자릿수

_NUMERAL = re.compile(r'-?\d+(\.\d*)?(e[+-]\d+)?')


class Operator(str, Enum):
    """사칙연산 연산자. 값은 내부 기호, glyph는 화면 기호"""

    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @classmethod
    def from_symbol(cls, symbol) -> 'Operator':
        """'+', '-', '*', '/' 또는 UI 기호 '−', '×', '÷'를 연산자로 변환"""
        if isinstance(symbol, cls):
            return symbol
        try:
            return _SYMBOLS[symbol]
        except (KeyError, TypeError):
            raise ValueError('unknown operator: {!r}'.format(symbol)) from None


_GLYPHS = {
    Operator.ADD: '+',
    Operator.SUBTRACT: '−',
    Operator.MULTIPLY: '×',
    Operator.DIVIDE: '÷',
}

_SYMBOLS = {
    '+': Operator.ADD,
    '-': Operator.SUBTRACT,
    '−': Operator.SUBTRACT,
    '*': Operator.MULTIPLY,
    '×': Operator.MULTIPLY,
    '/': Operator.DIVIDE,
    '÷': Operator.DIVIDE,
}


@dataclass(frozen=True)
class CalculatorState:
    """계산기 상태 한 벌. 모든 동작은 이전 상태로부터 새 상태를 만든다."""

    display: str = '0'
    accumulator: Optional[float] = None
    pending_operator: Optional[Operator] = None
    awaiting_operand: bool = False
    # 마지막 = 에서 쓴 연산자/오른쪽 피연산자 (= 반복용)
    last_operator: Optional[Operator] = None
    last_operand: Optional[float] = None
    last_action: Optional[str] = field(default=None, compare=False)

    @property
    def is_error(self) -> bool:
        return self.display == ERROR


INITIAL_STATE = CalculatorState()


# 순수 함수: 연산, 파싱, 포맷

def evaluate(a: float, b: float, op: Operator) -> float:
    """a op b. 0으로 나누기와 오버플로는 예외 대신 비유한 값(nan/inf)으로 돌려준다."""
    op = Operator.from_symbol(op)
    try:
        if op is Operator.ADD:
            return a + b
        if op is Operator.SUBTRACT:
            return a - b
        if op is Operator.MULTIPLY:
            return a * b
        if b == 0:
            return math.nan
        return a / b
    except OverflowError:
        return math.nan


def parse_display(text: str) -> float:
    """표시 문자열을 숫자로. 해석할 수 없으면 nan"""
    try:
        return float(text)
    except (TypeError, ValueError):
        return math.nan


def _strip_zeros(text: str) -> str:
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def format_number(n: float) -> str:
    """숫자를 화면용 문자열로 변환한다.

    - 비유한 값은 'Error'
    - |n| >= 1e12 또는 0 < |n| < 1e-9 는 유효 10자리 지수 표기 (예: '1.5e+12')
    - 그 외에는 유효 15자리로 float 잡음을 지운 뒤 소수 12자리까지 반올림
    - 뒤쪽 0과 홀로 남은 소수점은 지우고, '-0'은 만들지 않는다
    """
    if not math.isfinite(n):
        return ERROR
    if n == 0:
        return '0'

    magnitude = abs(n)
    if magnitude >= EXPONENT_UPPER or magnitude < EXPONENT_LOWER:
        text = '{:.{}e}'.format(n, SIGNIFICANT_DIGITS - 1)
        mantissa, _, exponent = text.partition('e')
        return '{}e{}'.format(_strip_zeros(mantissa), exponent)

    with localcontext() as ctx:
        ctx.prec = 28
        ctx.rounding = ROUND_HALF_UP
        value = Decimal('{:.{}g}'.format(n, NOISE_DIGITS))
        value = value.quantize(Decimal(1).scaleb(-DECIMAL_PLACES))
    if value.is_zero():
        return '0'
    return _strip_zeros(format(value, 'f'))


def _is_numeral_prefix(text: str) -> bool:
    return _NUMERAL.fullmatch(text) is not None


def _drop_negative_zero(text: str) -> str:
    # '-0.' 같은 표시는 부호 없이
    if text.startswith('-') and not any(ch in '123456789' for ch in text.split('e')[0]):
        return text[1:]
    return text


def _error_state(state: CalculatorState, action: str) -> CalculatorState:
    logger.warning('arithmetic error on %s (display=%r, accumulator=%r, operator=%s)',
                   action, state.display, state.accumulator,
                   state.pending_operator.value if state.pending_operator else None)
    return CalculatorState(display=ERROR, awaiting_operand=True, last_action=action)


def _reset(action: str) -> CalculatorState:
    return replace(INITIAL_STATE, last_action=action)


# 상태 전이

def input_digit(state: CalculatorState, digit: str) -> CalculatorState:
    if not isinstance(digit, str) or len(digit) != 1 or digit not in string.digits:
        raise ValueError('digit must be one of 0-9: {!r}'.format(digit))

    if state.is_error:
        state = INITIAL_STATE
    if state.awaiting_operand or 'e' in state.display:
        # 지수 표기 뒤에는 이어 붙이지 않고 새 숫자로 시작
        return replace(state, display=digit, awaiting_operand=False, last_action='digit')
    if state.display == '0':
        return replace(state, display=digit, last_action='digit')

    text = state.display + digit
    if len(text) > MAX_DISPLAY_LENGTH:
        # 길이 제한: 입력 무시
        return replace(state, last_action='digit')
    return replace(state, display=text, last_action='digit')


def input_dot(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        state = INITIAL_STATE
    if state.awaiting_operand:
        return replace(state, display='0.', awaiting_operand=False, last_action='dot')
    if '.' in state.display or 'e' in state.display:
        return replace(state, last_action='dot')

    text = state.display + '.'
    if len(text) > MAX_DISPLAY_LENGTH:
        return replace(state, last_action='dot')
    return replace(state, display=text, last_action='dot')


def toggle_sign(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return state

    value = parse_display(state.display)
    if not math.isfinite(value):
        return _error_state(state, 'sign')
    if value == 0:
        return replace(state, last_action='sign')

    if not state.awaiting_operand:
        # 입력 중인 숫자는 문자열에서 부호만 바꾼다 ('1.' -> '-1.')
        if state.display.startswith('-'):
            return replace(state, display=state.display[1:], last_action='sign')
        text = '-' + state.display
        if len(text) <= MAX_DISPLAY_LENGTH:
            return replace(state, display=text, last_action='sign')
        return replace(state, display=format_number(-value), last_action='sign')

    accumulator = state.accumulator
    if state.pending_operator is None and accumulator is not None:
        # = 직후 결과의 부호를 바꾸면 다음 연산에도 반영
        accumulator = -accumulator
    return replace(state, display=format_number(-value), accumulator=accumulator,
                   last_action='sign')


def apply_percent(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return state

    value = parse_display(state.display)
    if not math.isfinite(value):
        return _error_state(state, 'percent')
    return replace(state, display=format_number(value / 100), awaiting_operand=False,
                   last_action='percent')


def backspace(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return _reset('back')
    if state.awaiting_operand:
        return replace(state, last_action='back')
    if 'e' in state.display:
        # 지수 표기는 한 글자씩 지우면 값이 크게 바뀌므로 통째로 지운다
        return replace(state, display='0', last_action='back')

    text = _drop_negative_zero(state.display[:-1])
    if not _is_numeral_prefix(text):
        text = '0'
    return replace(state, display=text, last_action='back')


def clear_all(state: Optional[CalculatorState] = None) -> CalculatorState:
    # state는 쓰지 않지만 다른 전이 함수와 같은 모양으로 호출하기 위해 받는다
    return _reset('clear')


def clear_entry(state: CalculatorState) -> CalculatorState:
    """현재 입력만 0으로. 대기 중인 연산은 유지한다."""
    if state.is_error:
        return _reset('clear')
    return replace(state, display='0', awaiting_operand=True, last_action='clear')


def set_operator(state: CalculatorState, op) -> CalculatorState:
    operator = Operator.from_symbol(op)
    if state.is_error:
        # 오류 상태의 연산자 입력은 초기화만 하고 버린다
        return _reset('operator')

    value = parse_display(state.display)
    if not math.isfinite(value):
        return _error_state(state, 'operator')

    fresh_chain = state.pending_operator is None and not state.awaiting_operand
    if state.accumulator is None or fresh_chain:
        # 첫 연산자(또는 = 이후 새 숫자를 입력한 경우): 현재 값을 축적
        return replace(state, accumulator=value, pending_operator=operator,
                       awaiting_operand=True, last_action='operator')

    if state.pending_operator is not None and not state.awaiting_operand:
        # 왼쪽부터 차례로 계산 (우선순위 없음)
        result = evaluate(state.accumulator, value, state.pending_operator)
        if not math.isfinite(result):
            return _error_state(state, 'operator')
        return replace(state, display=format_number(result), accumulator=result,
                       pending_operator=operator, awaiting_operand=True,
                       last_action='operator')

    # 새 피연산자 없이 연산자만 다시 누름: 교체만 하고 계산하지 않는다
    return replace(state, pending_operator=operator, awaiting_operand=True,
                   last_action='operator')


def _complete(state: CalculatorState, left: float, right: float,
              operator: Operator) -> CalculatorState:
    result = evaluate(left, right, operator)
    if not math.isfinite(result):
        return _error_state(state, 'equals')
    return replace(state, display=format_number(result), accumulator=result,
                   pending_operator=None, awaiting_operand=True,
                   last_operator=operator, last_operand=right, last_action='equals')


def equals(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return state

    if state.accumulator is not None and state.pending_operator is not None:
        value = parse_display(state.display)
        if not math.isfinite(value):
            return _error_state(state, 'equals')
        # 연산자 직후 = 이면 축적값을 오른쪽 피연산자로 반복 (5 + = -> 10)
        right = state.accumulator if state.awaiting_operand else value
        return _complete(state, state.accumulator, right, state.pending_operator)

    if state.last_operator is not None:
        # = 반복: 직전 연산을 같은 오른쪽 피연산자로 다시 적용
        value = parse_display(state.display)
        if not math.isfinite(value):
            return _error_state(state, 'equals')
        left = value
        if state.awaiting_operand and state.accumulator is not None:
            left = state.accumulator
        return _complete(state, left, state.last_operand, state.last_operator)

    return replace(state, last_action='equals')


class Calculator:
    """연산 엔진: 현재 상태를 들고 키 하나당 동작 하나를 제공한다."""

    def __init__(self, state: Optional[CalculatorState] = None) -> None:
        self._state = state if state is not None else INITIAL_STATE

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def accumulator(self) -> Optional[float]:
        return self._state.accumulator

    @property
    def pending_operator(self) -> Optional[Operator]:
        return self._state.pending_operator

    def _apply(self, transition, *args) -> None:
        self._state = transition(self._state, *args)
        logger.debug('%s%r -> display=%r accumulator=%r operator=%s awaiting=%s',
                     transition.__name__, args, self._state.display,
                     self._state.accumulator,
                     self._state.pending_operator.value if self._state.pending_operator else None,
                     self._state.awaiting_operand)

    def reset(self) -> None:
        self._apply(clear_all)

    def clear_entry(self) -> None:
        self._apply(clear_entry)

    def input_digit(self, d: str) -> None:
        self._apply(input_digit, d)

    def input_dot(self) -> None:
        self._apply(input_dot)

    def negative_positive(self) -> None:
        self._apply(toggle_sign)

    def percent(self) -> None:
        self._apply(apply_percent)

    def backspace(self) -> None:
        self._apply(backspace)

    def set_operator(self, op) -> None:
        """op: Operator 또는 '+', '-', '*', '/', '−', '×', '÷'"""
        self._apply(set_operator, op)

    def equal(self) -> None:
        self._apply(equals)

    # 표시 문자열
    def display_text(self) -> str:
        return self._state.display

    def pending_text(self) -> str:
        """보조 표시용: '12 ×' 처럼 대기 중인 연산"""
        if self._state.accumulator is None or self._state.pending_operator is None:
            return ''
        return '{} {}'.format(format_number(self._state.accumulator),
                              self._state.pending_operator.glyph)
