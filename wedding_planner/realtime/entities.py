"""
Per-entity live mirror configurations, keyed by channel name
"""

from typing import Callable, Dict, Iterable, Optional

from wedding_planner.realtime.events import ChangeEvent, ChangeType
from wedding_planner.realtime.mirror import Join, MirrorSpec
from wedding_planner.realtime.notifications import Toast
from wedding_planner.realtime.reconciler import InsertPosition
from wedding_planner.services.budget_service import BudgetService
from wedding_planner.services.guest_service import GuestService
from wedding_planner.services.moodboard_service import UNKNOWN_USER
from wedding_planner.services.vendor_service import VendorService

ToastPolicy = Callable[[ChangeEvent], Optional[Toast]]

GUEST_NAME = Join(field="guest_name", table="guests", foreign_key="guest_id")


def crud_toasts(noun: str, label: Optional[str] = "name") -> ToastPolicy:
    """"<Noun> Added/Updated/Removed" toasts quoting the record's ``label`` field"""
    def policy(event: ChangeEvent) -> Optional[Toast]:
        record = event.record or {}
        named = f'{noun} "{record.get(label)}"' if label and record.get(label) else f"A {noun.lower()}"
        if event.type is ChangeType.INSERT:
            return Toast(f"{noun} Added", f"{named} has been added.")
        if event.type is ChangeType.UPDATE:
            return Toast(f"{noun} Updated", f"{named} has been updated.")
        return Toast(f"{noun} Removed", f"{named} has been removed.")
    return policy


def ignoring(policy: ToastPolicy, *fields: str) -> ToastPolicy:
    """Suppress update toasts when only ``fields`` (and updated_at) changed"""
    quiet = set(fields) | {"updated_at"}

    def filtered(event: ChangeEvent) -> Optional[Toast]:
        if event.type is ChangeType.UPDATE and event.old is not None and event.new is not None:
            changed = {key for key in set(event.old) | set(event.new) if event.old.get(key) != event.new.get(key)}
            if changed <= quiet:
                return None
        return policy(event)
    return filtered


def fixed_toasts(
    insert: Optional[Toast] = None,
    update: Optional[Toast] = None,
    delete: Optional[Toast] = None,
) -> ToastPolicy:
    """The same toast for every event of a type; None keeps that type quiet"""
    by_type = {ChangeType.INSERT: insert, ChangeType.UPDATE: update, ChangeType.DELETE: delete}

    def policy(event: ChangeEvent) -> Optional[Toast]:
        return by_type.get(event.type)
    return policy


def only_on(types: Iterable[ChangeType], policy: ToastPolicy) -> ToastPolicy:
    types = frozenset(types)

    def filtered(event: ChangeEvent) -> Optional[Toast]:
        return policy(event) if event.type in types else None
    return filtered


def rsvp_toast(event: ChangeEvent) -> Optional[Toast]:
    if event.type is not ChangeType.UPDATE or event.new is None:
        return None
    if event.old is not None and event.old.get("rsvp_status") == event.new.get("rsvp_status"):
        return None
    return Toast("RSVP Status Updated", f"A guest has changed their RSVP status to {event.new.get('rsvp_status')}")


def seat_toast(event: ChangeEvent) -> Optional[Toast]:
    if event.type is not ChangeType.UPDATE or event.new is None or event.old is None:
        return None
    if event.old.get("guest_id") == event.new.get("guest_id"):
        return None
    if event.new.get("guest_id"):
        return Toast("Seat Assigned", "A guest has been assigned to a seat.")
    return Toast("Seat Freed", "A guest has been removed from a seat.")


def review_toast(event: ChangeEvent) -> Optional[Toast]:
    if event.type is ChangeType.INSERT:
        return Toast("Review Added", "A new review has been added.")
    if event.type is ChangeType.UPDATE:
        return Toast("Review Updated", "A review has been updated.")
    return Toast("Review Removed", "A review has been removed.")


def moderation_toast(event: ChangeEvent) -> Optional[Toast]:
    if event.type is ChangeType.INSERT and (event.new or {}).get("status") == "pending":
        return Toast("New Pending Review", "A new review needs moderation.")
    return review_toast(event)


def is_approved(record) -> bool:
    return record.get("status") == "approved"


def is_pending(record) -> bool:
    return record.get("status") == "pending"


def summarize_payments(items):
    return VendorService.summarize_payments(items)


def summarize_votes(items):
    return {
        "reviews": len(items),
        "helpful_votes": sum(item.get("helpful_votes") or 0 for item in items),
        "unhelpful_votes": sum(item.get("unhelpful_votes") or 0 for item in items),
    }


def summarize_tables(items):
    return {"total_tables": len(items), "total_capacity": sum(item.get("capacity") or 0 for item in items)}


MIRRORS: Dict[str, MirrorSpec] = {spec.name: spec for spec in [
    # Guests & RSVP
    MirrorSpec("guests", "guests", toast=crud_toasts("Guest")),
    MirrorSpec("rsvp", "guests", toast=rsvp_toast, summarize=GuestService.summarize_rsvp),
    MirrorSpec("guest_groups", "guest_groups", toast=crud_toasts("Group")),

    # Seating
    MirrorSpec(
        "tables", "tables",
        toast=ignoring(crud_toasts("Table"), "position", "rotation"),
        summarize=summarize_tables,
    ),
    MirrorSpec(
        "seats", "seats",
        order_by="created_at", descending=False, position=InsertPosition.APPEND,
        scope_column="table_id",
        toast=seat_toast,
    ),

    # Budget
    MirrorSpec("budget_categories", "budget_categories", toast=crud_toasts("Category")),
    MirrorSpec(
        "expenses", "expenses",
        order_by="date",
        toast=crud_toasts("Expense"),
        summarize=BudgetService.summarize_expenses,
    ),

    # Vendors
    MirrorSpec("vendors", "vendors", toast=crud_toasts("Vendor")),
    MirrorSpec(
        "vendor_appointments", "vendor_appointments",
        order_by="start_time", descending=False, position=InsertPosition.APPEND,
        scope_column="vendor_id", scope_required=True,
        toast=crud_toasts("Appointment", label="title"),
    ),
    MirrorSpec(
        "vendor_contracts", "vendor_contracts",
        scope_column="vendor_id", scope_required=True,
        toast=crud_toasts("Contract", label="title"),
    ),
    MirrorSpec(
        "vendor_payments", "vendor_payments",
        order_by="due_date", descending=False, position=InsertPosition.APPEND,
        scope_column="vendor_id", scope_required=True,
        toast=crud_toasts("Payment", label="description"),
        summarize=summarize_payments,
    ),
    MirrorSpec(
        "vendor_reviews", "vendor_reviews",
        scope_column="vendor_id", scope_required=True,
        accept=is_approved,
        snapshot_filters={"status": "approved"},
        toast=review_toast,
        summarize=summarize_votes,
    ),
    MirrorSpec(
        "vendor_reviews_all", "vendor_reviews",
        scope_column="vendor_id", scope_required=True,
        toast=moderation_toast,
        summarize=summarize_votes,
    ),
    MirrorSpec(
        # Cross-vendor moderation queue; moderated reviews leave it
        "pending_reviews", "vendor_reviews",
        accept=is_pending, evict_on_reject=True,
        snapshot_filters={"status": "pending"},
        toast=only_on((ChangeType.INSERT,), moderation_toast),
    ),

    # Guest area
    MirrorSpec(
        "photos", "photos",
        scope_column="guest_id",
        toast=only_on((ChangeType.INSERT, ChangeType.DELETE), crud_toasts("Photo", label=None)),
    ),
    MirrorSpec(
        "photo_comments", "photo_comments",
        descending=False, position=InsertPosition.APPEND,
        scope_column="photo_id", scope_required=True,
        joins=(GUEST_NAME,),
        toast=only_on((ChangeType.INSERT,), crud_toasts("Comment", label=None)),
    ),
    MirrorSpec(
        "song_requests", "music_wishlist",
        scope_column="guest_id",
        joins=(GUEST_NAME,),
        toast=crud_toasts("Song", label="title"),
    ),

    # Planning
    MirrorSpec(
        "guest_relationships", "guest_relationships",
        descending=False, position=InsertPosition.APPEND,
        toast=fixed_toasts(
            insert=Toast("New Relationship Added", "A new guest relationship has been created."),
            update=Toast("Relationship Updated", "A guest relationship has been updated."),
            delete=Toast("Relationship Removed", "A guest relationship has been removed."),
        ),
    ),
    MirrorSpec(
        "mood_boards", "mood_boards",
        scope_column="user_id", scope_required=True,
        toast=fixed_toasts(
            insert=Toast("Mood Board Created", "A new mood board has been created."),
            update=Toast("Mood Board Updated", "The mood board details have been updated."),
            delete=Toast("Mood Board Deleted", "A mood board has been deleted."),
        ),
    ),
    MirrorSpec(
        "mood_board_items", "mood_board_items",
        descending=False, position=InsertPosition.APPEND,
        scope_column="board_id", scope_required=True,
        toast=fixed_toasts(
            insert=Toast("Item Added", "A new item has been added to the mood board."),
            delete=Toast("Item Removed", "An item has been removed from the mood board."),
        ),
    ),
    MirrorSpec(
        "mood_board_comments", "mood_board_comments",
        descending=False, position=InsertPosition.APPEND,
        scope_column="board_id", scope_required=True,
        joins=(Join(field="user_name", table="guests", foreign_key="user_id", fallback=UNKNOWN_USER),),
        toast=fixed_toasts(insert=Toast("New Comment", "A new comment has been added to the mood board.")),
    ),
    MirrorSpec(
        "mood_board_shares", "mood_board_shares",
        scope_column="shared_with_id", scope_required=True,
        toast=fixed_toasts(
            insert=Toast("Mood Board Shared With You", "A mood board has been shared with you."),
            delete=Toast("Mood Board Unshared", "A mood board is no longer shared with you."),
        ),
    ),
    MirrorSpec(
        "timeline_milestones", "timeline_milestones",
        order_by="due_date", descending=False, position=InsertPosition.APPEND,
        scope_column="user_id", scope_required=True,
    ),
    MirrorSpec(
        "timeline_tasks", "timeline_tasks",
        descending=False, position=InsertPosition.APPEND,
        scope_column="milestone_id", scope_required=True,
    ),
]}


def get_mirror_spec(name: str) -> MirrorSpec:
    try:
        return MIRRORS[name]
    except KeyError:
        raise KeyError(f"Unknown live channel '{name}'")
