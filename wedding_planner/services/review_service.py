"""
Vendor reviews and helpfulness votes
"""

import logging
from typing import Any, Dict, List, Optional

from wedding_planner.services.repositories import RecordNotFound, TableStore

logger = logging.getLogger(__name__)

REVIEW_SORTS = {
    "recent": ("created_at", True),
    "helpful": ("helpful_votes", True),
    "rating": ("rating", True),
}

class ReviewService:
    """Review moderation plus vote bookkeeping.

    Vote counts live on the review row (``helpful_votes``/``unhelpful_votes``)
    so review lists need no aggregation; every vote mutation goes through
    ``recount_votes`` to keep them in line with the vote rows.
    """

    @staticmethod
    def list_by_vendor(
        store: TableStore,
        vendor_id: str,
        include_non_approved: bool = False,
        sort_by: str = "recent",
    ) -> List[Dict[str, Any]]:
        if sort_by not in REVIEW_SORTS:
            raise ValueError(f"Invalid review sort '{sort_by}'")
        order_by, descending = REVIEW_SORTS[sort_by]
        filters = {"vendor_id": vendor_id}
        if not include_non_approved:
            filters["status"] = "approved"
        return store.select("vendor_reviews", filters, order_by=order_by, descending=descending)

    @staticmethod
    def get_review(store: TableStore, review_id: str) -> Dict[str, Any]:
        review = store.get("vendor_reviews", review_id)
        if review is None:
            raise RecordNotFound("vendor_reviews", review_id)
        return review

    @staticmethod
    def create_review(store: TableStore, vendor_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        if store.get("vendors", vendor_id) is None:
            raise RecordNotFound("vendors", vendor_id)
        return store.insert("vendor_reviews", {
            **data,
            "vendor_id": vendor_id,
            "status": "pending",
            "helpful_votes": 0,
            "unhelpful_votes": 0,
        })

    @staticmethod
    def moderate_review(store: TableStore, review_id: str, status: str) -> Dict[str, Any]:
        if status not in ("pending", "approved", "rejected"):
            raise ValueError(f"Invalid review status '{status}'")
        return store.update("vendor_reviews", review_id, {"status": status})

    @staticmethod
    def list_pending_reviews(store: TableStore) -> List[Dict[str, Any]]:
        return store.select("vendor_reviews", {"status": "pending"}, order_by="created_at")

    @staticmethod
    def delete_review(store: TableStore, review_id: str) -> None:
        store.delete_where("vendor_review_votes", {"review_id": review_id})
        store.delete("vendor_reviews", review_id)

    # -------- votes --------

    @staticmethod
    def get_user_vote(store: TableStore, review_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        votes = store.select("vendor_review_votes", {"review_id": review_id, "user_id": user_id}, limit=1)
        return votes[0] if votes else None

    @staticmethod
    def get_votes(store: TableStore, review_id: str) -> List[Dict[str, Any]]:
        return store.select("vendor_review_votes", {"review_id": review_id})

    @staticmethod
    def vote_on_review(store: TableStore, review_id: str, user_id: str, is_helpful: bool) -> Dict[str, Any]:
        """Cast, flip or keep a user's vote; a repeated identical vote is a no-op"""
        ReviewService.get_review(store, review_id)

        existing = ReviewService.get_user_vote(store, review_id, user_id)
        if existing is not None:
            if existing["is_helpful"] == is_helpful:
                return existing
            vote = store.update("vendor_review_votes", existing["id"], {"is_helpful": is_helpful})
        else:
            vote = store.insert("vendor_review_votes", {
                "review_id": review_id,
                "user_id": user_id,
                "is_helpful": is_helpful,
            })

        ReviewService.recount_votes(store, review_id)
        return vote

    @staticmethod
    def remove_vote(store: TableStore, review_id: str, user_id: str) -> bool:
        removed = store.delete_where("vendor_review_votes", {"review_id": review_id, "user_id": user_id})
        if removed:
            ReviewService.recount_votes(store, review_id)
        return removed > 0

    @staticmethod
    def recount_votes(store: TableStore, review_id: str) -> Dict[str, Any]:
        votes = ReviewService.get_votes(store, review_id)
        helpful = sum(1 for vote in votes if vote["is_helpful"])
        return store.update("vendor_reviews", review_id, {
            "helpful_votes": helpful,
            "unhelpful_votes": len(votes) - helpful,
        })

    @staticmethod
    def get_vote_counts(store: TableStore, review_id: str) -> Dict[str, int]:
        review = ReviewService.get_review(store, review_id)
        return {
            "helpful": review.get("helpful_votes") or 0,
            "unhelpful": review.get("unhelpful_votes") or 0,
        }
