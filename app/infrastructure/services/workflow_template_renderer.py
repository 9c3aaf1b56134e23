"""Workflow notification templates: template key → subject/body (Jinja).

A transition's notification_template is either a registered key or inline
body text (e.g. "Content has been approved"); inline text is rendered with
the same context and the default subject.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, Template

# Built-in templates, key → (subject, body). Render context: content_id,
# content_title, content_type, actor_name, from_state, from_state_name,
# to_state, to_state_name, transition_name, comment
BUILTIN_TEMPLATES: dict[str, tuple[str, str]] = {
    "workflow_transition": (
        "{{ content_title }}: {{ transition_name }}",
        "{{ actor_name }} moved \"{{ content_title }}\" from {{ from_state_name }} "
        "to {{ to_state_name }}.\n"
        "{% if comment %}\nComment: {{ comment }}\n{% endif %}",
    ),
    "content_rejected": (
        "Changes requested: {{ content_title }}",
        "{{ actor_name }} sent \"{{ content_title }}\" back to {{ to_state_name }}.\n"
        "{% if comment %}\nFeedback: {{ comment }}\n{% endif %}",
    ),
}

DEFAULT_SUBJECT = "{{ content_title }}: {{ transition_name }}"


class WorkflowTemplateRenderer:
    """Renders subject and body for a workflow notification from a key or inline text."""

    def __init__(
        self,
        templates: dict[str, tuple[str, str]] | None = None,
        default_subject: str = DEFAULT_SUBJECT,
    ) -> None:
        # Plain-text mail: no HTML escaping.
        self._env = Environment(autoescape=False)
        self._default_subject = self._env.from_string(default_subject)
        self._compiled: dict[str, tuple[Template, Template]] = {
            key: (self._env.from_string(subject), self._env.from_string(body))
            for key, (subject, body) in (templates or BUILTIN_TEMPLATES).items()
        }

    def has_template(self, template_key: str) -> bool:
        return template_key in self._compiled

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Render subject and body.

        Unknown keys are treated as inline body templates. Raises
        jinja2.TemplateError if inline text does not parse.
        """
        if template_key in self._compiled:
            subject_tpl, body_tpl = self._compiled[template_key]
        else:
            subject_tpl, body_tpl = self._default_subject, self._env.from_string(template_key)
        return subject_tpl.render(**context), body_tpl.render(**context)
