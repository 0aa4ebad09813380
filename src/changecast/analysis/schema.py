"""Structured analysis of recent changelog versions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["critical", "high", "medium", "low"]
Sentiment = Literal["positive", "neutral", "critical"]


class RemovalItem(BaseModel):
    feature: str
    severity: Severity = "medium"
    why: str = ""


class AnalysisCategories(BaseModel):
    critical_breaking_changes: list[str] = Field(default_factory=list)
    removals: list[RemovalItem] = Field(default_factory=list)
    major_features: list[str] = Field(default_factory=list)
    important_fixes: list[str] = Field(default_factory=list)
    new_slash_commands: list[str] = Field(default_factory=list)
    terminal_improvements: list[str] = Field(default_factory=list)
    api_changes: list[str] = Field(default_factory=list)


class ChangelogAnalysis(BaseModel):
    tldr: str = ""
    categories: AnalysisCategories = Field(default_factory=AnalysisCategories)
    action_items: list[str] = Field(default_factory=list)
    sentiment: Sentiment = "neutral"
