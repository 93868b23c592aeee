"""
Todo App
Schema plus the action handler that manages its task list.
"""

from typing import Any, Callable, Mapping

from core import get_logger, new_task_id
from interpreter import SET_STATE_KEY
from monitoring import metrics_collector

logger = get_logger(__name__)


class TodoActions:
    """
    Action handler for the todo schema.

    Tasks are ``{"id", "text", "completed"}`` mappings held in the State
    scope's ``tasks``; the text box is bound to ``inputValue``. List item
    buttons carry the task's own ``id`` in their context.
    """

    def __init__(self, id_factory: Callable[[], str] = new_task_id) -> None:
        self.id_factory = id_factory

    def __call__(self, action: str, context: Mapping[str, Any]) -> None:
        set_state = context.get(SET_STATE_KEY)
        if set_state is None:
            logger.error("set_state_missing", app="todo", action=action)
            metrics_collector.record_diagnostic("set_state_missing")
            return

        tasks = list(context.get("tasks") or [])
        input_value = context.get("inputValue") or ""
        target = context.get("id")
        if target is None:
            target = context.get("taskId")

        if action == "updateInput":
            set_state({"tasks": tasks, "inputValue": context.get("value") or ""})

        elif action == "addTask":
            text = str(input_value).strip()
            if not text:
                logger.debug("empty_task_ignored")
                return
            task = {"id": self.id_factory(), "text": text, "completed": False}
            set_state({"tasks": [*tasks, task], "inputValue": ""})
            logger.info("task_added", task_id=task["id"])

        elif action == "markComplete":
            if target is None:
                return
            set_state({
                "tasks": [
                    {**task, "completed": not task.get("completed")} if task.get("id") == target else task
                    for task in tasks
                ],
                "inputValue": input_value,
            })

        elif action == "deleteTask":
            if target is None:
                return
            set_state({
                "tasks": [task for task in tasks if task.get("id") != target],
                "inputValue": input_value,
            })
            logger.info("task_deleted", task_id=target)

        else:
            logger.warning("unknown_action", app="todo", action=action)


# Schema

_ITEM_BUTTON_STYLE = {
    "color": "#ffffff",
    "fontSize": "14px",
    "fontWeight": "600",
    "padding": "10px 16px",
    "borderRadius": "8px",
    "whiteSpace": "nowrap",
}

TODO_SCHEMA: dict[str, Any] = {
    "type": "Container",
    "props": {
        "flexDirection": "column",
        "gap": 24,
        "padding": 32,
        "style": {
            "maxWidth": "600px",
            "margin": "0 auto",
            "background": "linear-gradient(145deg, #ffffff 0%, #f8f9fa 100%)",
            "borderRadius": "24px",
            "boxShadow": "0 20px 60px rgba(0, 0, 0, 0.15), 0 0 0 1px rgba(0, 0, 0, 0.05)",
        },
    },
    "children": [
        {
            "type": "Container",
            "props": {"flexDirection": "row", "alignItems": "center", "gap": 12, "style": {"marginBottom": "8px"}},
            "children": [
                {"type": "Text", "props": {"content": "📝", "fontSize": 32, "style": {"lineHeight": 1}}},
                {"type": "Text", "props": {"content": "Todo List", "fontSize": 32, "fontWeight": "bold", "color": "#1f2937"}},
            ],
        },
        {
            "type": "State",
            "props": {"initialState": {"tasks": [], "inputValue": ""}},
            "children": [
                {
                    "type": "Container",
                    "props": {"flexDirection": "row", "gap": 12, "style": {"marginBottom": "8px"}},
                    "children": [
                        {
                            "type": "Input",
                            "props": {
                                "value": "{{inputValue}}",
                                "placeholder": "What needs to be done?",
                                "style": {"flex": 1, "fontSize": "16px", "padding": "14px 18px"},
                            },
                            "onChange": "updateInput",
                        },
                        {
                            "type": "Button",
                            "props": {
                                "label": "Add Task",
                                "style": {
                                    "backgroundColor": "#6366f1",
                                    "color": "#ffffff",
                                    "fontSize": "16px",
                                    "fontWeight": "600",
                                    "padding": "14px 24px",
                                    "borderRadius": "10px",
                                    "whiteSpace": "nowrap",
                                },
                            },
                            "onClick": "addTask",
                        },
                    ],
                },
                {
                    "type": "Container",
                    "props": {"flexDirection": "column", "gap": 12, "style": {"marginTop": "16px"}},
                    "children": [
                        {
                            "type": "Container",
                            "props": {
                                "flexDirection": "row",
                                "alignItems": "center",
                                "justifyContent": "space-between",
                                "style": {
                                    "padding": "12px 16px",
                                    "backgroundColor": "#f3f4f6",
                                    "borderRadius": "12px",
                                    "marginBottom": "8px",
                                },
                            },
                            "children": [
                                {
                                    "type": "Text",
                                    "props": {"content": "{{tasks.length}}", "fontSize": 18, "fontWeight": "bold", "color": "#6366f1"},
                                },
                                {
                                    "type": "Text",
                                    "props": {
                                        "content": '{{tasks.length}} === 1 ? "task" : "tasks"',
                                        "fontSize": 16,
                                        "color": "#6b7280",
                                    },
                                },
                            ],
                        },
                        {
                            "type": "List",
                            "props": {
                                "itemsKey": "tasks",
                                "style": {"display": "flex", "flexDirection": "column", "gap": "12px"},
                            },
                            "itemSchema": {
                                "type": "Container",
                                "props": {
                                    "flexDirection": "row",
                                    "gap": 12,
                                    "alignItems": "center",
                                    "style": {
                                        "padding": "16px 20px",
                                        "border": "2px solid #e5e7eb",
                                        "borderRadius": "14px",
                                        "backgroundColor": '{{completed}} ? "#f9fafb" : "#ffffff"',
                                        "opacity": "{{completed}} ? 0.7 : 1",
                                    },
                                },
                                "children": [
                                    {
                                        "type": "Container",
                                        "props": {
                                            "flexDirection": "row",
                                            "alignItems": "center",
                                            "gap": 12,
                                            "style": {"flex": 1, "minWidth": 0},
                                        },
                                        "children": [
                                            {
                                                "type": "Text",
                                                "props": {
                                                    "content": '{{completed}} ? "✅" : "⭕"',
                                                    "fontSize": 20,
                                                    "style": {"flexShrink": 0},
                                                },
                                            },
                                            {
                                                "type": "Text",
                                                "props": {
                                                    "content": "{{text}}",
                                                    "fontSize": 16,
                                                    "fontWeight": '{{completed}} ? "normal" : "500"',
                                                    "color": '{{completed}} ? "#9ca3af" : "#1f2937"',
                                                    "style": {
                                                        "flex": 1,
                                                        "textDecoration": '{{completed}} ? "line-through" : "none"',
                                                        "wordBreak": "break-word",
                                                    },
                                                },
                                            },
                                        ],
                                    },
                                    {
                                        "type": "Button",
                                        "props": {
                                            "label": '{{completed}} ? "Undo" : "Complete"',
                                            "style": {
                                                **_ITEM_BUTTON_STYLE,
                                                "backgroundColor": '{{completed}} ? "#f59e0b" : "#10b981"',
                                            },
                                        },
                                        "onClick": "markComplete",
                                    },
                                    {
                                        "type": "Button",
                                        "props": {
                                            "label": "Delete",
                                            "style": {**_ITEM_BUTTON_STYLE, "backgroundColor": "#ef4444"},
                                        },
                                        "onClick": "deleteTask",
                                    },
                                ],
                            },
                        },
                    ],
                },
            ],
        },
    ],
}
