import logging
import sys
from pathlib import Path
from typing import List

from PyQt5.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QFileDialog, QMessageBox, QComboBox,
    QPlainTextEdit, QListWidget
)
from PyQt5.QtGui import QFont
from PyQt5.QtCore import Qt

from ai_output import parse_ai_output
from models import Question, QuestionType
from parser import ScriptTemplate, TEMPLATE_EXAMPLES, parse_text, read_docx_text
from utils import save_questions

logger = logging.getLogger(__name__)

# 粘贴文本长度上限
MAX_INPUT_CHARS = 20000

AI_OUTPUT = "ai"

# 下拉框文字 → 模板
MODES = [
    ("通用格式", ScriptTemplate.OTHER),
    ("学习通", ScriptTemplate.CHAOXING),
    ("紧凑单选", ScriptTemplate.SINGLE_CHOICE1),
    ("AI 输出格式", AI_OUTPUT),
]

TYPE_NAMES = {
    QuestionType.SINGLE_CHOICE: "单选",
    QuestionType.MULTIPLE_CHOICE: "多选",
    QuestionType.TRUE_FALSE: "判断",
    QuestionType.SHORT_ANSWER: "简答",
    QuestionType.FILL_IN_BLANK: "填空",
}


def convert(text: str, mode) -> List[Question]:
    if mode == AI_OUTPUT:
        return parse_ai_output(text)
    return parse_text(text, mode)


def describe(q: Question) -> str:
    """预览列表里一行的文字"""
    by_id = {o.id: o.content for o in q.options}
    answers = [by_id.get(a, a) for a in q.answer_list()]
    return f"[{TYPE_NAMES[q.type]}] {q.content}  →  {'；'.join(answers)}"


class ConvertApp(QMainWindow):
    # 设计稿基准尺寸与字号
    BASE_WIDTH = 900
    BASE_HEIGHT = 640
    BASE_FONT = 12          # pt

    def __init__(self):
        super().__init__()
        self.setWindowTitle("题库文本转换")
        self.resize(self.BASE_WIDTH, self.BASE_HEIGHT)

        self.questions: List[Question] = []

        self._init_ui()
        self._apply_style()
        self.adjust_ui_scaling()

    # -------------------------------------------------
    # 窗口大小变化时自动重新计算字号
    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.adjust_ui_scaling()

    def adjust_ui_scaling(self):
        factor = min(self.width() / self.BASE_WIDTH, self.height() / self.BASE_HEIGHT)
        font = QFont()
        font.setPointSize(max(8, int(self.BASE_FONT * factor)))   # 最小 8pt
        for w in (self.txt_input, self.lst_preview, self.lbl_status, self.cb_mode,
                  self.btn_docx, self.btn_example, self.btn_convert, self.btn_save):
            w.setFont(font)

    # -------------------------------------------------
    def _init_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout()
        main_layout.setContentsMargins(32, 24, 32, 24)
        main_layout.setSpacing(14)
        central.setLayout(main_layout)

        # ---------- 顶部控制 ----------
        top_layout = QHBoxLayout()
        top_layout.setSpacing(12)
        main_layout.addLayout(top_layout)

        self.cb_mode = QComboBox()
        self.cb_mode.addItems([name for name, _ in MODES])
        self.cb_mode.setMinimumWidth(140)
        top_layout.addWidget(self.cb_mode)

        self.btn_example = QPushButton("填入示例")
        self.btn_example.clicked.connect(self.fill_example)
        top_layout.addWidget(self.btn_example)

        self.btn_docx = QPushButton("导入 Word")
        self.btn_docx.clicked.connect(self.import_docx)
        top_layout.addWidget(self.btn_docx)

        self.btn_convert = QPushButton("开始转换")
        self.btn_convert.clicked.connect(self.run_convert)
        top_layout.addWidget(self.btn_convert)

        self.btn_save = QPushButton("保存 JSON")
        self.btn_save.clicked.connect(self.save_json)
        self.btn_save.setEnabled(False)
        top_layout.addWidget(self.btn_save)

        # ---------- 输入 ----------
        self.txt_input = QPlainTextEdit()
        self.txt_input.setPlaceholderText("把题目文本粘贴到这里")
        main_layout.addWidget(self.txt_input, 3)

        # ---------- 结果 ----------
        self.lbl_status = QLabel("")
        self.lbl_status.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        main_layout.addWidget(self.lbl_status)

        self.lst_preview = QListWidget()
        self.lst_preview.setWordWrap(True)
        main_layout.addWidget(self.lst_preview, 2)

    # -------------------------------------------------
    def _apply_style(self):
        """Fusion 深色主题"""
        QApplication.setStyle("Fusion")
        dark_bg = "#23272e"
        card_bg = "#2b2f38"
        accent = "#5a9bd4"
        accent_hover = "#7fb0e2"
        border_radius = 8
        self.setStyleSheet(f"""
            QWidget {{ background-color: {dark_bg}; color: #f0f0f0; }}
            QPlainTextEdit, QListWidget {{
                background-color: {card_bg};
                border-radius: {border_radius}px;
                border: 1px solid #444;
                padding: 8px;
            }}
            QPushButton {{
                background-color: {accent};
                color: #fff;
                border: none;
                padding: 8px 18px;
                border-radius: {border_radius}px;
            }}
            QPushButton:hover {{ background-color: {accent_hover}; }}
            QPushButton:disabled {{ background-color: #444; color: #aaa; }}
        """)

    def current_mode(self):
        return MODES[self.cb_mode.currentIndex()][1]

    # -------------------------------------------------
    # ---- 示例 ----
    def fill_example(self):
        mode = self.current_mode()
        if mode == AI_OUTPUT:
            QMessageBox.information(self, "提示", "AI 输出格式没有示例，请粘贴 AI 返回的文本。")
            return
        self.txt_input.setPlainText(TEMPLATE_EXAMPLES[mode])

    # -------------------------------------------------
    # ---- 导入 Word ----
    def import_docx(self):
        f, _ = QFileDialog.getOpenFileName(
            self, "选择 Word 文件", "", "Word 文档 (*.docx)"
        )
        if not f:
            return
        try:
            self.txt_input.setPlainText(read_docx_text(f))
            self.lbl_status.setText(f"已导入《{Path(f).stem}》")
        except Exception as e:
            logger.exception("读取 %s 失败", f)
            QMessageBox.warning(self, "错误", f"读取《{Path(f).name}》时出错:\n{e}")

    # -------------------------------------------------
    # ---- 转换 ----
    def run_convert(self):
        text = self.txt_input.toPlainText()
        if not text.strip():
            QMessageBox.warning(self, "提示", "请先粘贴题目文本。")
            return
        if len(text) > MAX_INPUT_CHARS:
            QMessageBox.warning(self, "提示", f"文本过长，请控制在 {MAX_INPUT_CHARS} 字以内。")
            return

        self.questions = convert(text, self.current_mode())
        self.lst_preview.clear()
        if not self.questions:
            self.lbl_status.setText("")
            self.btn_save.setEnabled(False)
            QMessageBox.information(self, "提示", "未识别到题目，请检查格式。")
            return
        for q in self.questions:
            self.lst_preview.addItem(describe(q))
        self.lbl_status.setText(f"共识别 {len(self.questions)} 题")
        self.btn_save.setEnabled(True)

    # -------------------------------------------------
    # ---- 保存 ----
    def save_json(self):
        if not self.questions:
            QMessageBox.information(self, "提示", "暂无题目需要保存。")
            return
        f, _ = QFileDialog.getSaveFileName(
            self, "保存题目", "题目.json", "JSON 文件 (*.json)"
        )
        if not f:
            return
        try:
            save_questions(f, self.questions)
            QMessageBox.information(self, "成功", f"题目已保存至 {f}")
        except Exception as e:
            QMessageBox.warning(self, "错误", f"保存失败:\n{e}")


def main():
    logging.basicConfig(level=logging.INFO)
    app = QApplication(sys.argv)
    window = ConvertApp()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
