from __future__ import annotations
from typing import Optional

from PySide6.QtWidgets import (
    QComboBox, QDialog, QDoubleSpinBox, QFormLayout, QHBoxLayout, QLineEdit,
    QPushButton, QTextEdit, QVBoxLayout, QWidget
)

from oris.models.training import TrainingCategory, TrainingModule


class TrainingForm(QDialog):
    """Fiche formation du catalogue (prix HT en euros, durée en jours)."""

    def __init__(self, parent: Optional[QWidget] = None, training: Optional[TrainingModule] = None):
        super().__init__(parent)
        self.setWindowTitle("Formation")
        self.training = training

        self.ed_ref = QLineEdit()
        self.ed_title = QLineEdit()
        self.cb_category = QComboBox()
        for cat in TrainingCategory:
            self.cb_category.addItem(cat.value, cat)
        self.sp_days = QDoubleSpinBox()
        self.sp_days.setRange(0.0, 365.0)
        self.sp_days.setDecimals(1)
        self.sp_days.setValue(1.0)
        self.sp_price = QDoubleSpinBox()
        self.sp_price.setRange(0.0, 1e7)
        self.sp_price.setDecimals(2)
        self.sp_price.setSuffix(" € HT")
        self.ed_desc = QTextEdit()

        if training:
            self.ed_ref.setText(training.reference)
            self.ed_title.setText(training.title)
            self.cb_category.setCurrentIndex(max(0, self.cb_category.findData(training.category)))
            self.sp_days.setValue(training.duration_days)
            self.sp_price.setValue(training.price_ht)
            self.ed_desc.setPlainText(training.description)

        form = QFormLayout()
        form.addRow("Référence*", self.ed_ref)
        form.addRow("Intitulé*", self.ed_title)
        form.addRow("Catégorie", self.cb_category)
        form.addRow("Durée (jours)", self.sp_days)
        form.addRow("Prix", self.sp_price)
        form.addRow("Description", self.ed_desc)

        btn_ok = QPushButton("Valider")
        btn_cancel = QPushButton("Annuler")
        btn_ok.clicked.connect(self.accept)
        btn_cancel.clicked.connect(self.reject)
        bar = QHBoxLayout()
        bar.addStretch(1)
        bar.addWidget(btn_cancel)
        bar.addWidget(btn_ok)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addLayout(bar)

        self.ed_ref.returnPressed.connect(btn_ok.click)
        self.ed_title.returnPressed.connect(btn_ok.click)
        self.resize(520, 420)

    def get_training(self) -> Optional[TrainingModule]:
        ref = self.ed_ref.text().strip()
        title = self.ed_title.text().strip()
        if not ref or not title:
            return None
        t = TrainingModule(
            reference=ref,
            title=title,
            category=self.cb_category.currentData(),
            duration_days=self.sp_days.value(),
            price_ht=round(self.sp_price.value(), 2),
            description=self.ed_desc.toPlainText().strip(),
        )
        if self.training:
            t.id = self.training.id
        return t
