"""
Interactive configuration message and its input controls.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, MutableSequence, Optional, Protocol, Sequence, Set


@dataclass
class Interaction:
    """A user action delivered by the chat platform."""
    user_id: str
    origin_id: Optional[str] = None  # guild / community the lobby lives in
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])


class Transport(Protocol):
    """Delivers rendered messages to users."""
    
    def deliver(self, interaction: Optional[Interaction], payload: Dict[str, Any], ephemeral: bool = False) -> None:
        ...


@dataclass
class Button:
    custom_id: str
    label: str
    style: str = "primary"  # primary|secondary|success|danger
    disabled: bool = False
    
    def render(self) -> Dict[str, Any]:
        return {
            "type": "button",
            "id": self.custom_id,
            "label": self.label,
            "style": self.style,
            "disabled": self.disabled,
        }


class FlagsInput:
    """Row of toggle buttons bound to a sequence of booleans."""
    
    def __init__(self, custom_id: str, label: str, options: Sequence[str], values: MutableSequence[bool]):
        if len(options) != len(values):
            raise ValueError(f"{label}: {len(options)} options but {len(values)} values")
        self.custom_id = custom_id
        self.label = label
        self.options = list(options)
        self.values = values
    
    def toggle(self, index: int) -> bool:
        if not 0 <= index < len(self.options):
            raise IndexError(f"{self.label} has no option {index}")
        self.values[index] = not self.values[index]
        return self.values[index]
    
    def handle(self, action: str, value: Any = None) -> None:
        self.toggle(int(action))
    
    def render(self) -> Dict[str, Any]:
        return {
            "type": "flags",
            "id": self.custom_id,
            "label": self.label,
            "options": [
                {
                    "id": f"{self.custom_id}:{index}",
                    "label": name,
                    "enabled": bool(self.values[index]),
                }
                for index, name in enumerate(self.options)
            ],
        }


class NumberInput:
    """Bounded integer picker with step buttons."""
    
    def __init__(
        self,
        custom_id: str,
        label: str,
        minimum: int,
        default: int,
        maximum: int,
        on_change: Callable[[int], None],
    ):
        if not minimum <= default <= maximum:
            raise ValueError(f"{label}: default {default} outside [{minimum}, {maximum}]")
        self.custom_id = custom_id
        self.label = label
        self.minimum = minimum
        self.maximum = maximum
        self.on_change = on_change
        self.value = default
        on_change(default)
    
    def set(self, value: int) -> int:
        """Clamp value into range and report it to the owner."""
        self.value = max(self.minimum, min(self.maximum, int(value)))
        self.on_change(self.value)
        return self.value
    
    def step(self, delta: int) -> int:
        return self.set(self.value + delta)
    
    def handle(self, action: str, value: Any = None) -> None:
        if action == "min":
            self.step(-1)
        elif action == "max":
            self.step(1)
        elif action == "" and value is not None:
            self.set(value)
        else:
            raise ValueError(f"Unsupported action '{action}' for {self.label}")
    
    def render(self) -> Dict[str, Any]:
        return {
            "type": "number",
            "id": self.custom_id,
            "label": self.label,
            "value": self.value,
            "min": self.minimum,
            "max": self.maximum,
            "can_decrease": self.value > self.minimum,
            "can_increase": self.value < self.maximum,
        }


Control = Any  # FlagsInput | NumberInput


class MessageController:
    """Owns one configuration message and re-renders it on demand."""
    
    def __init__(self, render: Callable[[], Dict[str, Any]], transport: Transport):
        self.render_view = render
        self.transport = transport
        self.controls: List[Control] = []
        self.buttons: List[Button] = []
        self.disabled: Set[str] = set()
    
    def add_control(self, control: Control):
        self.controls.append(control)
    
    def add_button(self, button: Button):
        self.buttons.append(button)
    
    def clear_controls(self):
        self.controls = []
    
    def render(self) -> Dict[str, Any]:
        view = dict(self.render_view())
        components = [control.render() for control in self.controls]
        buttons = []
        for button in self.buttons:
            rendered = button.render()
            rendered["disabled"] = rendered["disabled"] or button.custom_id in self.disabled
            buttons.append(rendered)
        if buttons:
            components.append({"type": "row", "components": buttons})
        view["components"] = components
        return view
    
    def reply(self, interaction: Interaction):
        """Send the message in response to the interaction that opened it."""
        self.transport.deliver(interaction, self.render())
    
    def update_all(self, interaction: Optional[Interaction] = None):
        """Refresh the message for everyone watching it."""
        self.transport.deliver(interaction, self.render())
    
    def notify(self, interaction: Interaction, content: str):
        """Send a message only the interacting user can see."""
        self.transport.deliver(interaction, {"content": content}, ephemeral=True)
    
    def disable_buttons(self, interaction: Optional[Interaction], *custom_ids: str):
        self.disabled.update(custom_ids)
        self.update_all(interaction)
