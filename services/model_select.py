"""
Model selection control.
A labeled select list bound to the current model id.
"""
from dataclasses import dataclass
from html import escape
from typing import Callable, Optional, Sequence

from utils.logger import app_logger
from utils.model_catalog import deepseek_models


@dataclass
class ModelSelect:
    """
    Select control over a model listing.

    `options` are shown exactly as given; callers pass an already sorted
    catalog listing. `on_change` receives the newly chosen model id.
    """
    value: str
    options: Sequence[str]
    on_change: Optional[Callable[[str], None]] = None
    label: str = "Model"
    element_id: str = "model-select"
    css_class: Optional[str] = None

    def select(self, model: str) -> str:
        """
        Choose a model and emit it through `on_change`.

        Raises:
            ValueError: the model is not one of the options
        """
        if model not in self.options:
            raise ValueError(f"Unknown model: {model}")

        self.value = model
        if self.on_change:
            self.on_change(model)
        app_logger.info(f"Model selected: {model}")
        return model

    def to_dict(self) -> dict:
        return {
            "id": self.element_id,
            "label": self.label,
            "value": self.value,
            "options": list(self.options),
        }

    def render(self) -> str:
        """Render the control as an HTML fragment."""
        items = "".join(
            f'<option value="{escape(m)}"{" selected" if m == self.value else ""}>{escape(m)}</option>'
            for m in self.options
        )
        class_attr = f' class="{escape(self.css_class)}"' if self.css_class else ""
        return (
            f'<div{class_attr}>'
            f'<label for="{escape(self.element_id)}">{escape(self.label)}</label>'
            f'<select id="{escape(self.element_id)}" name="model">{items}</select>'
            f'</div>'
        )


def deepseek_model_select(value: str, on_change: Optional[Callable[[str], None]] = None, css_class: Optional[str] = None) -> ModelSelect:
    """Select control over the DeepSeek catalog."""
    return ModelSelect(value=value, options=deepseek_models, on_change=on_change, css_class=css_class)
