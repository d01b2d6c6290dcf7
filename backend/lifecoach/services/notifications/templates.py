"""Nudge reminder e-mail content."""
from __future__ import annotations

from html import escape
from typing import List, Optional

from lifecoach.services.notifications.base import NudgeReminderItem

DEFAULT_DISPLAY_NAME = "there"


def display_name_for(name: Optional[str]) -> str:
    return name.strip() if name and name.strip() else DEFAULT_DISPLAY_NAME


def reminder_subject(display_name: str, count: int) -> str:
    if count == 1:
        return f"{display_name}, a gentle nudge from your coach"
    return f"{display_name}, {count} gentle nudges from your coach"


def reminder_text(display_name: str, items: List[NudgeReminderItem]) -> str:
    intro = "Here's what" if len(items) == 1 else "Here are the things"
    lines = [
        f"Hi {display_name},",
        "",
        f"Sometimes we need a gentle reminder. {intro} you asked me to nudge you about:",
        "",
    ]
    for item in items:
        lines.append(f"- {item.content}")
        lines.append(f"  Mark as done: {item.completion_url}")
    lines.extend(
        [
            "",
            "This is just a gentle reminder, no pressure and no judgment. You'll only hear from me "
            "once a day, and only if there's something to nudge about.",
            "",
            "Sent with care from your Life Coach",
        ]
    )
    return "\n".join(lines)


def reminder_html(display_name: str, items: List[NudgeReminderItem]) -> str:
    intro = "Here's what" if len(items) == 1 else "Here are the things"
    rows = "".join(
        f"""
      <tr>
        <td style="padding: 16px 0; border-bottom: 1px solid #e5e7eb;">
          <p style="margin: 0 0 12px 0; font-size: 16px; color: #374151; line-height: 1.6;">{escape(item.content)}</p>
          <a href="{escape(item.completion_url, quote=True)}"
             style="display: inline-block; padding: 10px 20px; background-color: #4b6b52; color: #ffffff;
                    text-decoration: none; border-radius: 8px; font-size: 14px; font-weight: 500;">Mark as done</a>
        </td>
      </tr>"""
        for item in items
    )
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1.0"></head>
<body style="margin: 0; padding: 0; font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f9fafb;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background-color: #f9fafb; padding: 40px 20px;">
    <tr><td align="center">
      <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 16px; max-width: 100%;">
        <tr><td style="padding: 40px 40px 20px 40px; text-align: center; border-bottom: 1px solid #e5e7eb;">
          <h1 style="margin: 0; font-size: 28px; font-weight: 400; color: #374151; font-family: Georgia, serif;">A Gentle Nudge</h1>
        </td></tr>
        <tr><td style="padding: 32px 40px;">
          <p style="margin: 0 0 24px 0; font-size: 16px; color: #6b7280;">Hi {escape(display_name)},</p>
          <p style="margin: 0 0 32px 0; font-size: 16px; color: #6b7280;">Sometimes we need a gentle reminder. {intro} you asked me to nudge you about:</p>
          <table width="100%" cellpadding="0" cellspacing="0" style="margin-bottom: 32px;">{rows}
          </table>
          <p style="margin: 32px 0 0 0; font-size: 14px; color: #9ca3af; font-style: italic;">This is just a gentle reminder, no pressure and no judgment. You'll only hear from me once a day, and only if there's something to nudge about.</p>
        </td></tr>
        <tr><td style="padding: 24px 40px; background-color: #f9fafb; border-top: 1px solid #e5e7eb;">
          <p style="margin: 0; font-size: 12px; color: #9ca3af; text-align: center;">Sent with care from your Life Coach</p>
        </td></tr>
      </table>
    </td></tr>
  </table>
</body>
</html>
"""
