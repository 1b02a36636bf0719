"""
Results Table
=============
Two-column view (Label, Model Output) of the last batch, or an empty-state
message when there is nothing to show.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt
from PySide6.QtWidgets import QAbstractItemView, QHeaderView, QLabel, QStackedWidget, QTableView

from csvinference.model.results import ResultRecord

EMPTY_MESSAGE = "Run inference to see results"


class ResultsTableModel(QAbstractTableModel):
    HEADERS = ("Label", "Model Output")

    def __init__(self, records: Sequence[ResultRecord] = (), parent=None) -> None:
        super().__init__(parent)
        self._records: List[ResultRecord] = list(records)

    def set_records(self, records: Sequence[ResultRecord]) -> None:
        self.beginResetModel()
        self._records = list(records)
        self.endResetModel()

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._records)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self.HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Optional[str]:
        if not index.isValid() or role != Qt.DisplayRole:
            return None
        record = self._records[index.row()]
        return record.label if index.column() == 0 else record.output

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Optional[str]:
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self.HEADERS[section]
        return str(section + 1)


class ResultsView(QStackedWidget):
    """Switches between the empty-state label (page 0) and the table (page 1)."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setMinimumHeight(400)
        self.setStyleSheet("QStackedWidget { border: 1px solid gray; border-radius: 8px; }")

        self.lbl_empty = QLabel(EMPTY_MESSAGE)
        self.lbl_empty.setAlignment(Qt.AlignCenter)

        self.model = ResultsTableModel()
        self.table = QTableView()
        self.table.setModel(self.model)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)

        self.addWidget(self.lbl_empty)
        self.addWidget(self.table)

    def set_records(self, records: Sequence[ResultRecord]) -> None:
        self.model.set_records(records)
        self.setCurrentIndex(1 if records else 0)
