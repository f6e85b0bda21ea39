# gui.py - TMIPS assembler front-end

from PyQt5.QtWidgets import QApplication, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QTextEdit, QLabel, QPlainTextEdit
import sys
from assembler import assemble, error_report
from diagnostics import AsmError

class AssemblerGUI(QWidget):
    def __init__(self):
        super().__init__()
        self.initUI()

    def initUI(self):
        self.setWindowTitle("TMIPS Assembler")
        self.setGeometry(100, 100, 1000, 600)
        # listings line up only in a fixed-width font
        self.setStyleSheet("QPlainTextEdit, QTextEdit { font-family: Consolas, monospace; }")

        # two columns: editor on the left, object code and errors on the right
        main_layout = QHBoxLayout()

        left_layout = QVBoxLayout()
        self.label_code = QLabel("Source:")
        left_layout.addWidget(self.label_code)
        self.text_code = QPlainTextEdit()
        self.text_code.setPlaceholderText(".text\nmain: add $t0, $s1, $s2\n      j main")
        left_layout.addWidget(self.text_code)
        self.button_assemble = QPushButton("Assemble")
        self.button_assemble.clicked.connect(self.assemble_code)
        left_layout.addWidget(self.button_assemble)

        main_layout.addLayout(left_layout, 1)

        right_layout = QVBoxLayout()
        self.label_result = QLabel("Object code:")
        right_layout.addWidget(self.label_result)
        self.text_result = QTextEdit()
        self.text_result.setReadOnly(True)
        right_layout.addWidget(self.text_result, 1)

        self.label_errors = QLabel("Errors:")
        right_layout.addWidget(self.label_errors)
        self.text_errors = QTextEdit()
        self.text_errors.setReadOnly(True)
        right_layout.addWidget(self.text_errors, 1)

        main_layout.addLayout(right_layout, 1)

        self.setLayout(main_layout)

    def assemble_code(self):
        # clear both panes before every run
        self.text_result.clear()
        self.text_errors.clear()

        assembly_code = self.text_code.toPlainText()
        try:
            object_code, errors = assemble(assembly_code)
        except AsmError as e:
            self.text_errors.setPlainText(str(e))
            return
        if errors:
            self.text_errors.setPlainText("\n".join(error_report(assembly_code, errors)))
        else:
            self.text_result.setPlainText("\n".join(object_code))

def main():
    app = QApplication(sys.argv)
    gui = AssemblerGUI()
    gui.show()
    return app.exec_()

if __name__ == "__main__":
    sys.exit(main())
