"""HTTP routes for course content.

Every route is scoped to one course. Reads of an unreachable course
database come back empty; writes fail with 503 so a lost write is never
reported as success.
"""

from __future__ import annotations

from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status

from community.dependencies import (
    get_content_repository,
    require_course_manager,
    require_course_member,
)
from community.domain import NewComment, NewPost, PostKind, TargetKind
from community.infrastructure.repository import CourseContentRepository
from community.presentation.models import (
    AssignmentStatusResponse,
    CommentResponse,
    CompleteAssignmentRequest,
    CreateCommentRequest,
    CreatePostRequest,
    PostResponse,
    ReactionResponse,
    ReactionToggleResponse,
    ToggleReactionRequest,
    UpdateCommentRequest,
    UpdatePostRequest,
    UserStatsResponse,
)
from registry.application.authorization import can_manage_course
from registry.application.value_objects import CurrentUser
from tenancy.domain import TenantUnavailable

router = APIRouter(prefix="/courses/{course_id}", tags=["community"])

T = TypeVar("T")

Member = Annotated[CurrentUser, Depends(require_course_member)]
Manager = Annotated[CurrentUser, Depends(require_course_manager)]
Repository = Annotated[CourseContentRepository, Depends(get_content_repository)]


def _written(result: T | TenantUnavailable) -> T:
    if isinstance(result, TenantUnavailable):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Course database unavailable ({result.reason})",
        )
    return result


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


def _require_author_or_manager(
    actor: CurrentUser, course_id: str, author_id: str
) -> None:
    if actor.id != author_id and not can_manage_course(actor, course_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the author or a course admin may do this",
        )


# Posts


@router.get("/posts")
async def list_posts(
    course_id: str,
    current_user: Member,
    repository: Repository,
    kind: PostKind | None = None,
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
) -> list[PostResponse]:
    """List active posts, oldest first."""
    posts = await repository.get_posts(course_id, limit=limit, kind=kind)
    return [PostResponse.from_domain(post) for post in posts]


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(
    course_id: str,
    request: CreatePostRequest,
    current_user: Manager,
    repository: Repository,
) -> PostResponse:
    """Create a post, assignment or announcement (course admins only)."""
    post = _written(
        await repository.create_post(
            course_id,
            NewPost(
                title=request.title,
                content=request.content,
                kind=request.kind,
                author_id=current_user.id,
                deadline=request.deadline,
                media_urls=request.media_urls,
                pinned=request.pinned,
            ),
        )
    )
    return PostResponse.from_domain(post)


@router.get("/posts/{post_id}")
async def get_post(
    course_id: str, post_id: str, current_user: Member, repository: Repository
) -> PostResponse:
    post = await repository.get_post_by_id(course_id, post_id)
    if post is None:
        raise _not_found("Post")
    return PostResponse.from_domain(post)


@router.patch("/posts/{post_id}")
async def update_post(
    course_id: str,
    post_id: str,
    request: UpdatePostRequest,
    current_user: Member,
    repository: Repository,
) -> PostResponse:
    existing = await repository.get_post_by_id(course_id, post_id)
    if existing is None:
        raise _not_found("Post")
    _require_author_or_manager(current_user, course_id, existing.author_id)

    post = _written(
        await repository.update_post(course_id, post_id, request.to_domain())
    )
    if post is None:
        raise _not_found("Post")
    return PostResponse.from_domain(post)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    course_id: str, post_id: str, current_user: Member, repository: Repository
) -> None:
    """Soft-delete a post; it disappears from listings and lookups."""
    existing = await repository.get_post_by_id(course_id, post_id)
    if existing is None:
        raise _not_found("Post")
    _require_author_or_manager(current_user, course_id, existing.author_id)

    if not _written(await repository.soft_delete_post(course_id, post_id)):
        raise _not_found("Post")


# Comments


@router.get("/posts/{post_id}/comments")
async def list_comments(
    course_id: str,
    post_id: str,
    current_user: Member,
    repository: Repository,
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
) -> list[CommentResponse]:
    comments = await repository.get_comments(course_id, post_id, limit=limit)
    return [CommentResponse.from_domain(comment) for comment in comments]


@router.post("/posts/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    course_id: str,
    post_id: str,
    request: CreateCommentRequest,
    current_user: Member,
    repository: Repository,
) -> CommentResponse:
    comment = _written(
        await repository.create_comment(
            course_id,
            NewComment(
                post_id=post_id,
                author_id=current_user.id,
                content=request.content,
                parent_id=request.parent_id,
            ),
        )
    )
    if comment is None:
        raise _not_found("Post")
    return CommentResponse.from_domain(comment)


@router.patch("/comments/{comment_id}")
async def update_comment(
    course_id: str,
    comment_id: str,
    request: UpdateCommentRequest,
    current_user: Member,
    repository: Repository,
) -> CommentResponse:
    existing = await repository.get_comment_by_id(course_id, comment_id)
    if existing is None:
        raise _not_found("Comment")
    _require_author_or_manager(current_user, course_id, existing.author_id)

    comment = _written(
        await repository.update_comment(course_id, comment_id, request.content)
    )
    if comment is None:
        raise _not_found("Comment")
    return CommentResponse.from_domain(comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    course_id: str, comment_id: str, current_user: Member, repository: Repository
) -> None:
    existing = await repository.get_comment_by_id(course_id, comment_id)
    if existing is None:
        raise _not_found("Comment")
    _require_author_or_manager(current_user, course_id, existing.author_id)

    if not _written(await repository.soft_delete_comment(course_id, comment_id)):
        raise _not_found("Comment")


# Reactions


@router.get("/reactions")
async def list_reactions(
    course_id: str,
    target_id: str,
    target_kind: TargetKind,
    current_user: Member,
    repository: Repository,
) -> list[ReactionResponse]:
    reactions = await repository.get_reactions(course_id, target_id, target_kind)
    return [ReactionResponse.from_domain(reaction) for reaction in reactions]


@router.post("/reactions")
async def toggle_reaction(
    course_id: str,
    request: ToggleReactionRequest,
    current_user: Member,
    repository: Repository,
) -> ReactionToggleResponse:
    """Add, change or remove the caller's reaction on a post or comment."""
    toggle = _written(
        await repository.toggle_reaction(
            course_id,
            request.target_id,
            request.target_kind,
            current_user.id,
            request.kind,
        )
    )
    return ReactionToggleResponse.from_domain(toggle)


@router.delete("/reactions/{reaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reaction(
    course_id: str, reaction_id: str, current_user: Manager, repository: Repository
) -> None:
    """Remove any reaction (moderation; course admins only)."""
    if not _written(await repository.delete_reaction(course_id, reaction_id)):
        raise _not_found("Reaction")


# Assignments and stats


@router.get("/assignments/status")
async def list_my_assignment_statuses(
    course_id: str, current_user: Member, repository: Repository
) -> list[AssignmentStatusResponse]:
    statuses = await repository.get_user_assignment_statuses(
        course_id, current_user.id
    )
    return [AssignmentStatusResponse.from_domain(s) for s in statuses]


@router.get("/assignments/{post_id}/status")
async def get_assignment_status(
    course_id: str, post_id: str, current_user: Member, repository: Repository
) -> AssignmentStatusResponse | None:
    """The caller's status for one assignment; null when never touched."""
    status_ = await repository.get_assignment_status(
        course_id, post_id, current_user.id
    )
    return AssignmentStatusResponse.from_domain(status_) if status_ else None


@router.put("/assignments/{post_id}/complete")
async def set_assignment_completion(
    course_id: str,
    post_id: str,
    request: CompleteAssignmentRequest,
    current_user: Member,
    repository: Repository,
) -> AssignmentStatusResponse:
    """Mark an assignment done or not done for the caller.

    Raises:
        HTTPException: 404 if the post is not an active assignment
        HTTPException: 503 if the course database is unavailable
    """
    status_ = _written(
        await repository.set_assignment_completion(
            course_id,
            post_id,
            current_user.id,
            request.completed,
            submission_note=request.submission_note,
        )
    )
    if status_ is None:
        raise _not_found("Assignment")
    return AssignmentStatusResponse.from_domain(status_)


@router.get("/stats/me")
async def get_my_stats(
    course_id: str, current_user: Member, repository: Repository
) -> UserStatsResponse | None:
    stats = await repository.get_user_stats(course_id, current_user.id)
    return UserStatsResponse.from_domain(stats) if stats else None


@router.get("/leaderboard")
async def get_course_leaderboard(
    course_id: str,
    current_user: Member,
    repository: Repository,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[UserStatsResponse]:
    """Top users of this course by points."""
    stats = await repository.get_course_leaderboard(course_id, limit=limit)
    return [UserStatsResponse.from_domain(s) for s in stats]
