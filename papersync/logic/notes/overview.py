"""Homework overview page written once at the vault root.

The page is static Markdown; the task lists are rendered inside Obsidian by
Dataview queries over ``PaperSync/Weekly``.
"""
from typing import Final

from papersync.infra.paths import WEEKLY_DIR_PATH

_DUE_FILTER = 't => !t.completed && t.text.includes("[due::")'
_DUE_MATCH = r'task.text.match(/\[due::\s*(\d{4}-\d{2}-\d{2})\]/)'


def _due_section(title: str, today_expr: str, comparison: str, empty_message: str) -> str:
    return f"""## {title}

```dataviewjs
const ref = {today_expr};
const pages = dv.pages('"{WEEKLY_DIR_PATH}"');
const tasks = [];
for (const page of pages) {{
  const pageTasks = page.file.tasks.where({_DUE_FILTER});
  for (const task of pageTasks) {{
    const dateMatch = {_DUE_MATCH};
    if (dateMatch && dateMatch[1] {comparison} ref) tasks.push(task);
  }}
}}
if (tasks.length === 0) dv.paragraph("✅ {empty_message}");
else dv.taskList(tasks, false);
```"""


_TODAY: Final[str] = 'dv.date("today").toISODate()'
_TOMORROW: Final[str] = 'dv.date("today").plus({ days: 1 }).toISODate()'

_HEADER = """---
title: Homework Overview
---

# 📚 Homework Overview

This page dynamically displays all uncompleted homework tasks from PaperSync. Click checkboxes to mark tasks as complete.
"""

_GENERAL_SECTION = f"""## 📋 General Tasks

```dataviewjs
const pages = dv.pages('"{WEEKLY_DIR_PATH}"');
const tasks = [];
for (const page of pages) {{
  const allTasks = page.file.tasks.where(t => !t.completed);
  for (const task of allTasks) {{
    if (task.section && task.section.subpath === "General Tasks") tasks.push(task);
  }}
}}
if (tasks.length === 0) dv.paragraph("✅ No uncompleted general tasks!");
else dv.taskList(tasks, false);
```"""

_NO_DUE_SECTION = f"""## 📝 No Due Date

```dataviewjs
const pages = dv.pages('"{WEEKLY_DIR_PATH}"');
const tasks = [];
for (const page of pages) {{
  const pageTasks = page.file.tasks.where(t => !t.completed && !t.text.includes("[due::"));
  for (const task of pageTasks) {{
    if (!task.section || task.section.subpath !== "General Tasks") tasks.push(task);
  }}
}}
if (tasks.length === 0) dv.paragraph("✅ All tasks have due dates!");
else dv.taskList(tasks, false);
```"""


def generate_overview_content() -> str:
    sections = [
        _HEADER,
        _due_section("⚠️ Overdue", _TODAY, "<", "No overdue tasks!"),
        _due_section("🔴 Due Today", _TODAY, "===", "No tasks due today!"),
        _due_section("🟡 Due Tomorrow", _TOMORROW, "===", "No tasks due tomorrow!"),
        _due_section("🟢 Due Later", _TOMORROW, ">", "No upcoming tasks!"),
        _GENERAL_SECTION,
        _NO_DUE_SECTION,
    ]
    return "\n\n---\n\n".join(sections)
