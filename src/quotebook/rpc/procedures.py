"""Application procedure set.

Every protected procedure is scoped to ``ctx.user``; the managers re-check
ownership on each call and answer foreign rows with NOT_FOUND.
"""

from typing import Optional

from ..access.schemas import EmailAccessResponse, EmailInput, WhitelistEntryResponse
from ..collections.schemas import CollectionCreate, CollectionResponse, CollectionUpdate
from ..db.schemas import SuccessResponse, UserResponse
from ..kindle.schemas import HistoryInput, SyncLogResponse, SyncRequest, SyncResult
from ..quotes.schemas import CollectionIdInput, IdInput, QuoteCreate, QuoteResponse, QuoteUpdate
from .context import RequestContext
from .router import Access, Router

app_router = Router()


# ============================================================================
# auth
# ============================================================================


@app_router.query("auth.me", access=Access.PUBLIC)
def me(ctx: RequestContext) -> Optional[UserResponse]:
    if ctx.user is None:
        return None
    return UserResponse.model_validate(ctx.user)


@app_router.mutation("auth.logout", access=Access.PUBLIC)
def logout(ctx: RequestContext) -> SuccessResponse:
    ctx.clear_session = True
    return SuccessResponse()


@app_router.query("auth.checkEmailAccess", access=Access.PUBLIC, input=EmailInput)
def check_email_access(ctx: RequestContext, data: EmailInput) -> EmailAccessResponse:
    return EmailAccessResponse(allowed=ctx.services.whitelist.is_allowed(data.email))


# ============================================================================
# whitelist (admin only)
# ============================================================================


@app_router.query("whitelist.getAll", access=Access.ADMIN)
def whitelist_get_all(ctx: RequestContext) -> list[WhitelistEntryResponse]:
    return [
        WhitelistEntryResponse.model_validate(entry)
        for entry in ctx.services.whitelist.list_entries()
    ]


@app_router.mutation("whitelist.add", access=Access.ADMIN, input=EmailInput)
def whitelist_add(ctx: RequestContext, data: EmailInput) -> SuccessResponse:
    ctx.services.whitelist.add(data.email, added_by=ctx.user.id)
    return SuccessResponse()


@app_router.mutation("whitelist.remove", access=Access.ADMIN, input=EmailInput)
def whitelist_remove(ctx: RequestContext, data: EmailInput) -> SuccessResponse:
    ctx.services.whitelist.remove(data.email)
    return SuccessResponse()


# ============================================================================
# collections
# ============================================================================


@app_router.query("collections.list")
def collections_list(ctx: RequestContext) -> list[CollectionResponse]:
    return [
        CollectionResponse.model_validate(c)
        for c in ctx.services.collections.list_collections(ctx.user.id)
    ]


@app_router.query("collections.get", input=IdInput)
def collections_get(ctx: RequestContext, data: IdInput) -> CollectionResponse:
    collection = ctx.services.collections.get_collection(ctx.user.id, data.id)
    return CollectionResponse.model_validate(collection)


@app_router.mutation("collections.create", input=CollectionCreate)
def collections_create(ctx: RequestContext, data: CollectionCreate) -> CollectionResponse:
    collection = ctx.services.collections.create_collection(ctx.user.id, data)
    return CollectionResponse.model_validate(collection)


@app_router.mutation("collections.update", input=CollectionUpdate)
def collections_update(ctx: RequestContext, data: CollectionUpdate) -> SuccessResponse:
    ctx.services.collections.update_collection(ctx.user.id, data)
    return SuccessResponse()


@app_router.mutation("collections.delete", input=IdInput)
def collections_delete(ctx: RequestContext, data: IdInput) -> SuccessResponse:
    ctx.services.collections.delete_collection(ctx.user.id, data.id)
    return SuccessResponse()


# ============================================================================
# quotes
# ============================================================================


@app_router.query("quotes.list")
def quotes_list(ctx: RequestContext) -> list[QuoteResponse]:
    return [QuoteResponse.model_validate(q) for q in ctx.services.quotes.list_quotes(ctx.user.id)]


@app_router.query("quotes.listByCollection", input=CollectionIdInput)
def quotes_list_by_collection(ctx: RequestContext, data: CollectionIdInput) -> list[QuoteResponse]:
    quotes = ctx.services.quotes.list_by_collection(ctx.user.id, data.collection_id)
    return [QuoteResponse.model_validate(q) for q in quotes]


@app_router.query("quotes.get", input=IdInput)
def quotes_get(ctx: RequestContext, data: IdInput) -> QuoteResponse:
    return QuoteResponse.model_validate(ctx.services.quotes.get_quote(ctx.user.id, data.id))


@app_router.mutation("quotes.create", input=QuoteCreate)
def quotes_create(ctx: RequestContext, data: QuoteCreate) -> QuoteResponse:
    return QuoteResponse.model_validate(ctx.services.quotes.create_quote(ctx.user.id, data))


@app_router.mutation("quotes.update", input=QuoteUpdate)
def quotes_update(ctx: RequestContext, data: QuoteUpdate) -> SuccessResponse:
    ctx.services.quotes.update_quote(ctx.user.id, data)
    return SuccessResponse()


@app_router.mutation("quotes.delete", input=IdInput)
def quotes_delete(ctx: RequestContext, data: IdInput) -> SuccessResponse:
    ctx.services.quotes.delete_quote(ctx.user.id, data.id)
    return SuccessResponse()


@app_router.mutation("quotes.markAsRead", input=IdInput)
def quotes_mark_as_read(ctx: RequestContext, data: IdInput) -> SuccessResponse:
    ctx.services.quotes.mark_as_read(ctx.user.id, data.id)
    return SuccessResponse()


@app_router.query("quotes.getRandom")
def quotes_get_random(ctx: RequestContext) -> Optional[QuoteResponse]:
    quote = ctx.services.quotes.get_random(ctx.user.id)
    return QuoteResponse.model_validate(quote) if quote else None


# ============================================================================
# kindle
# ============================================================================


@app_router.mutation("kindle.sync", input=SyncRequest)
def kindle_sync(ctx: RequestContext, data: SyncRequest) -> SyncResult:
    return ctx.services.kindle.sync(ctx.user.id, data.highlights, data.collection_id)


@app_router.query("kindle.getLastSync")
def kindle_get_last_sync(ctx: RequestContext) -> Optional[SyncLogResponse]:
    log = ctx.services.kindle.get_last_sync(ctx.user.id)
    return SyncLogResponse.model_validate(log) if log else None


@app_router.query("kindle.history", input=HistoryInput)
def kindle_history(ctx: RequestContext, data: HistoryInput) -> list[SyncLogResponse]:
    logs = ctx.services.kindle.list_sync_history(ctx.user.id, limit=data.limit)
    return [SyncLogResponse.model_validate(log) for log in logs]
