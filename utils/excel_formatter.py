"""
Write DataFrames to a styled Excel workbook, one table per sheet.

Used for the optional quote snapshot: each run can drop a dated .xlsx next
to the generated pages so a day's numbers can be inspected later.
"""

import os

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows
from openpyxl.worksheet.table import Table, TableStyleInfo


class ExcelFormatter:
    def __init__(self):
        self.wb = Workbook()
        self._table_names = set()
        self._sheet_used = False

    def add_to_sheet(self, df: pd.DataFrame, sheet_name: str) -> None:
        """
        Append `df` as a styled table on its own sheet.

        :param df: rows to write; the header row comes from the columns
        :param sheet_name: sheet title, also used for the table display name
        """
        # The first sheet reuses the workbook's default blank sheet
        if not self._sheet_used:
            ws = self.wb.active
            ws.title = sheet_name
            self._sheet_used = True
        else:
            ws = self.wb.create_sheet(title=sheet_name)

        for row in dataframe_to_rows(df, index=False, header=True):
            ws.append(row)

        if df.empty:
            self._table_names.add(sheet_name)
            return

        table_ref = f"A1:{get_column_letter(ws.max_column)}{ws.max_row}"
        display_name = "".join(sheet_name.split(" "))
        base_name = display_name
        counter = 2
        while display_name in self._table_names:
            display_name = f"{base_name}_{counter}"
            counter += 1
        self._table_names.add(display_name)

        table = Table(displayName=display_name, ref=table_ref)
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleMedium9",
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=False,
        )
        ws.add_table(table)

        sample = df.head(500)
        for i, col in enumerate(df.columns, start=1):
            max_len = max(len(str(cell)) for cell in [col] + sample[col].astype(str).tolist())
            ws.column_dimensions[get_column_letter(i)].width = min(max_len + 4, 60)

    def save(self, filename: str, location: str) -> str:
        """
        Save the workbook to `location/filename` and start a fresh one.

        Returns:
            The full path written.

        Raises:
            ValueError: if filename does not end in .xlsx
        """
        if not filename.endswith(".xlsx"):
            raise ValueError(f"Expected an .xlsx filename, got '{filename}'")

        os.makedirs(location, exist_ok=True)
        spath = os.path.join(location, filename)
        self.wb.save(spath)
        self.wb = Workbook()
        self._table_names = set()
        self._sheet_used = False
        return spath
