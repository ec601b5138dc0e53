"""Todo list widget."""
from dashterm.core.plugin import PluginBase
from dashterm.display import glyphs

ROW_HEIGHT = 20
FIRST_ROW = 35


def _checked_todos(todos) -> list[dict]:
    if not isinstance(todos, list):
        raise ValueError(f"todos must be a list, not {type(todos).__name__}")
    for i, todo in enumerate(todos):
        if not (isinstance(todo, dict)
                and isinstance(todo.get("text"), str)
                and isinstance(todo.get("completed"), bool)):
            raise ValueError(f"task {i} needs a text string and a completed flag")
    return todos


def _task_index(args: list[str], plugin: "TodoPlugin") -> int | None:
    try:
        index = int(args[0])
    except (IndexError, ValueError):
        return None
    return index if 0 <= index < len(plugin.state["todos"]) else None


def add_todo(args: list[str], plugin: "TodoPlugin") -> str:
    task = " ".join(args)
    if not task:
        return "Task cannot be empty"
    plugin.state["todos"].append({"text": task, "completed": False})
    return f"Added task to {plugin.title}: {task}"


def remove_todo(args: list[str], plugin: "TodoPlugin") -> str:
    index = _task_index(args, plugin)
    if index is None:
        return f"Task {args[0] if args else ''} not found in {plugin.title}"
    plugin.state["todos"].pop(index)
    return f"Removed task {index} from {plugin.title}"


def list_todos(args: list[str], plugin: "TodoPlugin") -> str:
    lines = [
        f"{i}: {todo['text']} {'[x]' if todo['completed'] else '[ ]'}"
        for i, todo in enumerate(plugin.state["todos"])
    ]
    return "\n".join(lines) or "No tasks"


def toggle_todo(args: list[str], plugin: "TodoPlugin") -> str:
    index = _task_index(args, plugin)
    if index is None:
        return f"Task {args[0] if args else ''} not found in {plugin.title}"
    todo = plugin.state["todos"][index]
    todo["completed"] = not todo["completed"]
    return f"Toggled task {index} in {plugin.title}"


class TodoPlugin(PluginBase):
    PLUGIN_TYPE = "todo"
    PLUGIN_NAME = "Tasks"
    ICON_NAME = "todo"
    HELP = "\n".join([
        "add-todo <id|name> <task...>       Add a task",
        "remove-todo <id|name> <index>      Remove a task",
        "list-todos <id|name>               List tasks",
        "toggle-todo <id|name> <index>      Toggle a task",
    ])
    COMMANDS = {
        "add-todo": add_todo,
        "remove-todo": remove_todo,
        "list-todos": list_todos,
        "toggle-todo": toggle_todo,
    }
    DEFAULT_WIDTH = 200
    DEFAULT_HEIGHT = 150

    def initial_state(self) -> dict:
        return {"todos": [], "input": "", "isAdding": False}

    def update(self, data) -> None:
        """Replaces the task list; raises ValueError and keeps the old one when it is malformed."""
        if "todos" in data:
            self.state["todos"] = _checked_todos(data["todos"])

    def render_lines(self) -> list[str]:
        lines = [
            f"{glyphs.icons.get('done' if todo['completed'] else 'pending', '-')} {todo['text']}"
            for todo in self.state["todos"]
        ]
        if self.state["isAdding"]:
            lines.append(f"+ {self.state['input'] or 'Enter task...'}")
        return lines

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer & keyboard
    # ─────────────────────────────────────────────────────────────────────────

    def in_add_button(self, x: int, y: int) -> bool:
        return (
            self.x + self.width - 30 <= x <= self.x + self.width - 10
            and self.y + self.height - 20 <= y <= self.y + self.height - 5
        )

    def in_todo(self, x: int, y: int, index: int) -> bool:
        row_y = self.y + FIRST_ROW + index * ROW_HEIGHT
        return self.x <= x <= self.x + self.width and row_y - 10 <= y <= row_y + 10

    def on_pointer_down(self, x: int, y: int) -> bool:
        if self.in_add_button(x, y):
            self.state["isAdding"] = True
            return True
        for index, todo in enumerate(self.state["todos"]):
            if self.in_todo(x, y, index):
                todo["completed"] = not todo["completed"]
                return True
        return False

    def on_key_down(self, key: str, character: str | None = None) -> bool:
        if not self.state["isAdding"]:
            return False
        if key == "enter":
            if self.state["input"]:
                self.state["todos"].append({"text": self.state["input"], "completed": False})
                self.state["input"] = ""
                self.state["isAdding"] = False
            return True
        if key == "escape":
            self.state["input"] = ""
            self.state["isAdding"] = False
            return True
        if key == "backspace":
            self.state["input"] = self.state["input"][:-1]
            return True
        if character and len(character) == 1 and character.isprintable():
            self.state["input"] += character
            return True
        return False
