#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# calculator_window.py
# Python 3.x, PyQt5
# PEP 8 준수, 문자열은 기본적으로 ' ' 사용

import sys
import string
import logging
import argparse
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QApplication,
    QWidget,
    QGridLayout,
    QVBoxLayout,
    QPushButton,
    QLineEdit,
    QLabel,
)

from calculator import Calculator

LOG_PATH = 'calculator.log'

BUTTONS = [
    ['AC', '+/-', '%', '÷'],
    ['7',  '8',   '9', '×'],
    ['4',  '5',   '6', '−'],
    ['1',  '2',   '3', '+'],
    ['0',  '.',   '⌫', '='],
]

OPERATOR_LABELS = {'+', '−', '×', '÷', '-', '*', '/'}

# 특수 키 -> 버튼 라벨
KEY_LABELS = {
    Qt.Key_Return: '=',
    Qt.Key_Enter: '=',
    Qt.Key_Backspace: '⌫',
    Qt.Key_Escape: 'AC',
    Qt.Key_Delete: 'C',
}

# 문자 키 -> 버튼 라벨
TEXT_LABELS = {
    '=': '=',
    '.': '.',
    ',': '.',
    '%': '%',
    '+': '+',
    '-': '−',
    '*': '×',
    '/': '÷',
}


def setup_logger(log_path=LOG_PATH, level=logging.INFO):
    """콘솔과 파일(UTF-8)로 동시에 로그를 남기는 로거를 설정한다."""
    logger = logging.getLogger('calculator')
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 콘솔
    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    # 파일(UTF-8), 경로가 비어 있으면 생략
    if log_path:
        fh = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


def action_for_key(key: int, text: str) -> Optional[str]:
    """키 이벤트(key 코드, 입력 문자)를 버튼 라벨로 바꾼다. 모르는 키는 None"""
    if key in KEY_LABELS:
        return KEY_LABELS[key]
    if len(text) == 1 and text in string.digits:
        return text
    return TEXT_LABELS.get(text)


def dispatch(engine: Calculator, label: str) -> bool:
    """버튼 라벨 하나를 엔진 동작 하나로 실행한다. 처리하지 않은 라벨이면 False"""
    if label == 'AC':
        engine.reset()
    elif label == 'C':
        engine.clear_entry()
    elif label == '+/-':
        engine.negative_positive()
    elif label == '%':
        engine.percent()
    elif label == '=':
        engine.equal()
    elif label == '⌫':
        engine.backspace()
    elif label in OPERATOR_LABELS:
        engine.set_operator(label)
    elif label == '.':
        engine.input_dot()
    elif len(label) == 1 and label in string.digits:
        engine.input_digit(label)
    else:
        return False
    return True


class CalculatorWindow(QWidget):
    """PyQt5 UI: 버튼/키보드 -> Calculator 엔진 연결"""

    def __init__(self, engine: Optional[Calculator] = None) -> None:
        super().__init__()
        self.engine = engine if engine is not None else Calculator()
        self._build_ui()

    def _build_ui(self) -> None:
        self.setWindowTitle('Calculator')
        root = QVBoxLayout()
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)
        self.setLayout(root)

        # 대기 중인 연산 (예: '12 ×')
        self.pending = QLabel()
        self.pending.setAlignment(Qt.AlignRight)
        root.addWidget(self.pending)

        self.display = QLineEdit()
        self.display.setReadOnly(True)
        self.display.setAlignment(Qt.AlignRight)
        self.display.setFocusPolicy(Qt.NoFocus)
        font = QFont(self.display.font())
        font.setPointSize(28)
        self.display.setFont(font)
        root.addWidget(self.display)

        grid = QGridLayout()
        grid.setSpacing(6)
        root.addLayout(grid)

        self.buttons = {}
        for r, row in enumerate(BUTTONS):
            for c, label in enumerate(row):
                btn = QPushButton(label)
                btn.setMinimumHeight(56)
                btn.setCursor(Qt.PointingHandCursor)
                # 키 입력은 창이 받도록 버튼은 포커스를 갖지 않는다
                btn.setFocusPolicy(Qt.NoFocus)
                # clicked는 checked(bool) 인자를 내보내므로 첫 인자를 흡수하도록 작성
                btn.clicked.connect(lambda checked=False, ch=label: self.on_button(ch))
                grid.addWidget(btn, r, c)
                self.buttons[label] = btn

        self.setFocusPolicy(Qt.StrongFocus)
        self.resize(360, 540)
        self.refresh()

    def on_button(self, ch: str) -> None:
        dispatch(self.engine, ch)
        self.refresh()

    def keyPressEvent(self, event) -> None:
        label = action_for_key(event.key(), event.text())
        if label is None:
            super().keyPressEvent(event)
            return
        self.on_button(label)

    def refresh(self) -> None:
        self.display.setText(self.engine.display_text())
        self.pending.setText(self.engine.pending_text())


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='사칙연산 계산기')
    parser.add_argument('--log', default=LOG_PATH,
                        help='로그 파일 경로(기본값: calculator.log, 빈 문자열이면 파일 로그 생략)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='로그 레벨(기본값: INFO, DEBUG면 키 입력마다 상태를 기록)')
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logger = setup_logger(args.log, getattr(logging, args.log_level))
    logger.info('[시작] 계산기 창을 엽니다.')

    app = QApplication(sys.argv[:1])
    w = CalculatorWindow()
    w.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
