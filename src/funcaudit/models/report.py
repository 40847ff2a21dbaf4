"""Export report row with the fixed column set of the audit spreadsheet."""

from __future__ import annotations

from pydantic import BaseModel, Field

REPORT_SHEET_NAME = "研判结果"
REPORT_FILE_NAME = "batch_audit_results.xlsx"
EMPTY_CELL = "-"

VERDICT_DEFINED = "已定义"
VERDICT_NEW = "新功能"
VERDICT_UNPROCESSED = "未处理"


class ReportRow(BaseModel):
    """One flat export row. Column titles are the field aliases, in order."""

    query: str = Field(alias="查询Query")
    verdict: str = Field(alias="判定结果")
    confidence: str = Field(default=EMPTY_CELL, alias="匹配置信度")
    app_name: str = Field(default=EMPTY_CELL, alias="匹配App")
    function_name: str = Field(default=EMPTY_CELL, alias="匹配功能点")
    reasoning: str = Field(default=EMPTY_CELL, alias="研判理由")
    suggestion: str = Field(default=EMPTY_CELL, alias="建议")

    model_config = {"populate_by_name": True}

    @classmethod
    def column_titles(cls) -> list[str]:
        return [f.alias or name for name, f in cls.model_fields.items()]

    def as_cells(self) -> list[str]:
        return list(self.model_dump().values())
