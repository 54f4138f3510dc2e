"""
Planning timeline: milestone checklists generated from the wedding date.

The template is laid out in months before the wedding. How much of it is
kept depends on how far away the wedding is:

- more than 12 months: every milestone
- 6 to 12 months: upcoming milestones, plus a "Catch Up Tasks" milestone
  holding the open tasks of milestones already past
- under 6 months: upcoming milestones, plus a "Priority Tasks" milestone
  holding only the critical open tasks of milestones already past
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from wedding_planner.services.repositories import RecordNotFound, StoreError, TableStore
from wedding_planner.utils.dates import as_naive_utc

logger = logging.getLogger(__name__)

# (key, title, months before the wedding, [(task key, task name)])
MILESTONE_TEMPLATE = [
    ("initial-planning", "Initial Planning", 12, [
        ("budget", "Set your wedding budget"),
        ("guestList", "Create initial guest list"),
        ("date", "Choose wedding date"),
        ("venue", "Research and book venue"),
        ("weddingParty", "Choose wedding party members"),
    ]),
    ("vendors", "Book Key Vendors", 10, [
        ("photographer", "Book photographer"),
        ("catering", "Book caterer"),
        ("florist", "Research florists"),
        ("dj", "Book DJ or band"),
        ("officiant", "Book officiant"),
    ]),
    ("attire", "Wedding Attire", 9, [
        ("dress", "Shop for wedding dress"),
        ("suit", "Shop for suit/tuxedo"),
        ("bridesmaids", "Choose bridesmaid dresses"),
        ("groomsmen", "Choose groomsmen attire"),
    ]),
    ("details", "Wedding Details", 7, [
        ("registry", "Create wedding registry"),
        ("website", "Set up wedding website"),
        ("hotels", "Reserve hotel room blocks"),
        ("transportation", "Arrange transportation"),
        ("honeymoon", "Plan honeymoon"),
    ]),
    ("invitations", "Invitations & Stationery", 5, [
        ("saveTheDate", "Send save-the-dates"),
        ("invitations", "Order invitations"),
        ("menu", "Finalize menu with caterer"),
        ("cake", "Order wedding cake"),
        ("favors", "Choose wedding favors"),
    ]),
    ("finalDetails", "Final Details", 3, [
        ("sendInvitations", "Send invitations"),
        ("finalFitting", "Schedule final dress fitting"),
        ("rings", "Purchase wedding rings"),
        ("license", "Apply for marriage license"),
        ("vows", "Write vows"),
    ]),
    ("lastMonth", "Last Month Preparations", 1, [
        ("rsvp", "Follow up on RSVPs"),
        ("seating", "Create seating chart"),
        ("timeline", "Finalize wedding day timeline"),
        ("vendors-confirm", "Confirm details with all vendors"),
        ("payments", "Make final payments"),
        ("rehearsal", "Plan rehearsal dinner"),
    ]),
    ("weekOf", "Week of Wedding", 0, [
        ("packup", "Pack for honeymoon"),
        ("beauty", "Hair and beauty appointments"),
        ("pickup", "Pick up attire"),
        ("rehearsal-dinner", "Attend rehearsal dinner"),
        ("emergency-kit", "Prepare wedding day emergency kit"),
    ]),
]

CRITICAL_TASKS = ("venue", "photographer", "catering", "officiant", "license")

def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months from ``start`` to ``end`` (negative when end is earlier)"""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and (end.day, end.time()) < (start.day, start.time()):
        months -= 1
    elif months < 0 and (end.day, end.time()) > (start.day, start.time()):
        months += 1
    return months

def planning_timeframe(months_left: int) -> str:
    if months_left > 12:
        return "long"
    if months_left >= 6:
        return "medium"
    return "short"

def _months_before(wedding_date: datetime, months: int) -> datetime:
    return (pd.Timestamp(wedding_date) - pd.DateOffset(months=months)).to_pydatetime()

def _milestone(key, title, due, today, tasks, completed) -> Dict[str, Any]:
    return {
        "key": key,
        "title": title,
        # Overdue milestones are due now
        "due_date": max(due, today),
        "tasks": [
            {"key": task_key, "name": name, "completed": task_key in completed, "skipped": False, "is_custom": False}
            for task_key, name in tasks
        ],
    }

class TimelineService:
    """Generates, stores and edits a couple's planning timeline"""

    @staticmethod
    def generate_timeline(
        wedding_date,
        completed: Iterable[str] = (),
        today: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        wedding_date = as_naive_utc(wedding_date)
        today = as_naive_utc(today) or datetime.utcnow()
        completed = set(completed)
        months_left = months_between(today, wedding_date)
        timeframe = planning_timeframe(months_left)

        upcoming, past = [], []
        for key, title, months, tasks in MILESTONE_TEMPLATE:
            due = _months_before(wedding_date, months)
            if timeframe == "long" or due >= today:
                upcoming.append(_milestone(key, title, due, today, tasks, completed))
            else:
                past.append((key, tasks))

        if timeframe == "medium":
            missed = [(k, name) for _, tasks in past for k, name in tasks if k not in completed]
            if missed:
                upcoming.insert(0, _milestone("catch-up", "Catch Up Tasks", today, today, missed, completed))
        elif timeframe == "short":
            critical = [
                (k, f"PRIORITY: {name}")
                for _, tasks in past for k, name in tasks
                if k not in completed and k in CRITICAL_TASKS
            ]
            if critical:
                upcoming.insert(0, _milestone("priority", "Priority Tasks", today, today, critical, completed))

        logger.info(f"Generated {timeframe} timeline with {len(upcoming)} milestones ({months_left} months to go)")
        return upcoming

    @staticmethod
    def save_timeline(store: TableStore, user_id: str, wedding_date, milestones: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Replace the user's stored timeline and remember the wedding date"""
        TimelineService.clear_timeline(store, user_id)
        TimelineService.set_wedding_date(store, user_id, wedding_date)

        for milestone in milestones:
            saved = store.insert("timeline_milestones", {
                "user_id": user_id,
                "key": milestone.get("key"),
                "title": milestone["title"],
                "due_date": as_naive_utc(milestone["due_date"]),
            })
            store.insert_many("timeline_tasks", [
                {
                    "milestone_id": saved["id"],
                    "key": task.get("key"),
                    "name": task["name"],
                    "completed": bool(task.get("completed")),
                    "skipped": bool(task.get("skipped")),
                    "is_custom": bool(task.get("is_custom")),
                }
                for task in milestone.get("tasks", [])
            ])
        return TimelineService.load_timeline(store, user_id)

    @staticmethod
    def load_timeline(store: TableStore, user_id: str) -> Dict[str, Any]:
        preference = TimelineService.get_preference(store, user_id)
        milestones = store.select("timeline_milestones", {"user_id": user_id}, order_by="due_date")
        for milestone in milestones:
            milestone["tasks"] = store.select("timeline_tasks", {"milestone_id": milestone["id"]}, order_by="created_at")
        return {
            "wedding_date": preference.get("wedding_date") if preference else None,
            "milestones": milestones,
        }

    @staticmethod
    def regenerate(store: TableStore, user_id: str, wedding_date, today: Optional[datetime] = None) -> Dict[str, Any]:
        """Rebuild the timeline for a (new) wedding date, keeping completed tasks ticked"""
        completed = TimelineService.completed_task_keys(store, user_id)
        milestones = TimelineService.generate_timeline(wedding_date, completed, today)
        return TimelineService.save_timeline(store, user_id, wedding_date, milestones)

    @staticmethod
    def clear_timeline(store: TableStore, user_id: str) -> None:
        for milestone in store.select("timeline_milestones", {"user_id": user_id}):
            store.delete_where("timeline_tasks", {"milestone_id": milestone["id"]})
            store.delete("timeline_milestones", milestone["id"])

    @staticmethod
    def completed_task_keys(store: TableStore, user_id: str) -> List[str]:
        keys = []
        for milestone in store.select("timeline_milestones", {"user_id": user_id}):
            tasks = store.select("timeline_tasks", {"milestone_id": milestone["id"], "completed": True})
            keys.extend(task["key"] for task in tasks if task.get("key"))
        return keys

    # -------- preferences --------

    @staticmethod
    def get_preference(store: TableStore, user_id: str) -> Optional[Dict[str, Any]]:
        rows = store.select("user_preferences", {"user_id": user_id}, limit=1)
        return rows[0] if rows else None

    @staticmethod
    def set_wedding_date(store: TableStore, user_id: str, wedding_date) -> Dict[str, Any]:
        values = {"wedding_date": as_naive_utc(wedding_date)}
        preference = TimelineService.get_preference(store, user_id)
        if preference:
            return store.update("user_preferences", preference["id"], values)
        return store.insert("user_preferences", {"user_id": user_id, **values})

    # -------- tasks --------

    @staticmethod
    def add_custom_task(store: TableStore, milestone_id: str, name: str) -> Dict[str, Any]:
        if not name or not name.strip():
            raise ValueError("Task name cannot be empty")
        if store.get("timeline_milestones", milestone_id) is None:
            raise RecordNotFound("timeline_milestones", milestone_id)
        return store.insert("timeline_tasks", {
            "milestone_id": milestone_id,
            "name": name.strip(),
            "is_custom": True,
        })

    @staticmethod
    def update_task(store: TableStore, task_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        allowed = {key: data[key] for key in ("name", "completed", "skipped") if data.get(key) is not None}
        if not allowed:
            raise StoreError("No task fields to update")
        return store.update("timeline_tasks", task_id, allowed)

    @staticmethod
    def delete_task(store: TableStore, task_id: str) -> None:
        store.delete("timeline_tasks", task_id)
