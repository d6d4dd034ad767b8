"""
Tests for identity linking across local, Google and Strava accounts.
"""

import pytest
from sqlalchemy import func, select

from ridegroups.exceptions import DuplicateAccountError, MissingEmailError
from ridegroups.features.auth import IdentityLinkingService, LinkOutcome, get_resolver
from ridegroups.features.google import GoogleProfile
from ridegroups.features.strava import StravaAthlete, StravaTokens
from ridegroups.features.users import (
    LoginRequest,
    SessionRepository,
    SignupRequest,
    User,
    UserRepository,
)


async def count_users(db) -> int:
    result = await db.execute(select(func.count()).select_from(User))
    return result.scalar()


def tokens(access="new-access", refresh="new-refresh", expires_at=1900000000) -> StravaTokens:
    return StravaTokens(access_token=access, refresh_token=refresh, expires_at=expires_at)


def athlete(id=777, username="ada", profile="https://strava.example/ada.jpg", **kwargs) -> StravaAthlete:
    return StravaAthlete(
        id=id,
        username=username,
        firstname=kwargs.pop("firstname", "Ada"),
        lastname=kwargs.pop("lastname", "Lovelace"),
        profile=profile,
        **kwargs,
    )


# =============================================================================
# Local
# =============================================================================

class TestSignup:
    @pytest.mark.asyncio
    async def test_creates_user_and_session(self, db):
        linked = await IdentityLinkingService(db).signup_local(
            SignupRequest(username="alice", email="alice@example.com", name="Alice")
        )

        assert linked.created
        assert linked.user.provider == "local"
        assert linked.user.username == "alice"
        assert await count_users(db) == 1

        session = await SessionRepository(db).get_active(linked.session.id)
        assert session is not None
        assert session.user_id == linked.user.id

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db):
        service = IdentityLinkingService(db)
        await service.signup_local(SignupRequest(username="alice", email="a@example.com", name="A"))

        with pytest.raises(DuplicateAccountError) as exc_info:
            await service.signup_local(SignupRequest(username="other", email="a@example.com", name="B"))

        assert exc_info.value.message == "Account already exists"
        assert await count_users(db) == 1

    @pytest.mark.asyncio
    async def test_duplicate_username(self, db):
        service = IdentityLinkingService(db)
        await service.signup_local(SignupRequest(username="alice", email="a@example.com", name="A"))

        with pytest.raises(DuplicateAccountError):
            await service.signup_local(SignupRequest(username="alice", email="b@example.com", name="B"))

        assert await count_users(db) == 1


class TestLogin:
    @pytest.mark.asyncio
    async def test_unknown_email_creates_user(self, db):
        linked = await IdentityLinkingService(db).login_local(
            LoginRequest(email="bob@example.com", password="anything")
        )

        assert linked.created
        assert linked.user.username == "bob"
        assert linked.user.name == "bob"

    @pytest.mark.asyncio
    async def test_known_email_logs_in(self, db):
        service = IdentityLinkingService(db)
        first = await service.login_local(LoginRequest(email="bob@example.com"))
        second = await service.login_local(LoginRequest(email="bob@example.com"))

        assert not second.created
        assert second.user.id == first.user.id
        assert second.session.id != first.session.id
        assert await count_users(db) == 1

    @pytest.mark.asyncio
    async def test_username_made_unique(self, db):
        db.add(User(username="bob", email="bob@elsewhere.com", name="Bob", provider="local"))
        await db.flush()

        linked = await IdentityLinkingService(db).login_local(LoginRequest(email="bob@example.com"))

        assert linked.user.username == "bob2"


class TestDemo:
    @pytest.mark.asyncio
    async def test_demo_user_created_once(self, db):
        service = IdentityLinkingService(db)
        first = await service.demo_login()
        second = await service.demo_login()

        assert first.created and not second.created
        assert first.user.id == second.user.id
        assert first.user.username == "demo_user"
        assert first.user.email == "demo@example.com"
        assert first.user.name == "Demo User"


# =============================================================================
# Google
# =============================================================================

class TestGoogle:
    @pytest.mark.asyncio
    async def test_new_user(self, db):
        profile = GoogleProfile(
            id="g-1",
            emails=["grace@example.com"],
            display_name="Grace Hopper",
            photos=["https://google.example/grace.png"],
        )

        linked = await IdentityLinkingService(db).link_google(profile)

        assert linked.created
        assert linked.user.provider == "google"
        assert linked.user.google_id == "g-1"
        assert linked.user.username == "grace"
        assert linked.user.avatar == "https://google.example/grace.png"

    @pytest.mark.asyncio
    async def test_merges_by_email_keeping_profile(self, db):
        existing = User(
            username="grace",
            email="grace@example.com",
            name="Amazing Grace",
            avatar=None,
            provider="local",
        )
        db.add(existing)
        await db.flush()

        linked = await IdentityLinkingService(db).link_google(GoogleProfile(
            id="g-1",
            emails=["grace@example.com"],
            display_name="Grace Hopper",
            photos=["https://google.example/grace.png"],
        ))

        assert linked.result.outcome == LinkOutcome.MERGED_EXISTING
        assert linked.user.id == existing.id
        assert linked.user.provider == "google"
        assert linked.user.name == "Amazing Grace"
        assert linked.user.avatar == "https://google.example/grace.png"
        assert await count_users(db) == 1

    @pytest.mark.asyncio
    async def test_missing_email(self, db):
        with pytest.raises(MissingEmailError):
            await IdentityLinkingService(db).link_google(GoogleProfile(id="g-2", display_name="Nobody"))

        assert await count_users(db) == 0


# =============================================================================
# Strava
# =============================================================================

class TestStravaUnseenAthlete:
    @pytest.mark.asyncio
    async def test_creates_user_with_synthesized_email(self, db):
        linked = await IdentityLinkingService(db).link_strava(tokens(), athlete())

        user = linked.user
        assert linked.created
        assert user.provider == "strava"
        assert user.strava_id == 777
        assert user.email == "ada@strava.local"
        assert user.name == "Ada Lovelace"
        assert user.strava_access_token == "new-access"
        assert user.strava_refresh_token == "new-refresh"
        assert user.strava_token_expiry == 1900000000
        assert await count_users(db) == 1

    @pytest.mark.asyncio
    async def test_synthesized_email_collision(self, db):
        db.add(User(username="ada", email="ada@strava.local", name="Other Ada", provider="local"))
        await db.flush()

        linked = await IdentityLinkingService(db).link_strava(tokens(), athlete())

        assert linked.user.email == "ada+777@strava.local"
        assert linked.user.username == "ada2"
        assert await count_users(db) == 2

    @pytest.mark.asyncio
    async def test_every_synthesized_email_taken(self, db):
        db.add_all([
            User(username="ada", email="ada@strava.local", name="Ada One", provider="local"),
            User(username="ada2", email="ada+777@strava.local", name="Ada Two", provider="local"),
            User(username="ada3", email="ada+777.2@strava.local", name="Ada Three", provider="local"),
        ])
        await db.flush()

        linked = await IdentityLinkingService(db).link_strava(tokens(), athlete())

        assert linked.created
        assert linked.user.email == "ada+777.3@strava.local"
        assert await count_users(db) == 4

    @pytest.mark.asyncio
    async def test_no_username(self, db):
        linked = await IdentityLinkingService(db).link_strava(
            tokens(), athlete(username=None, firstname="", lastname="")
        )

        assert linked.user.email == "athlete777@strava.local"
        assert linked.user.name == "athlete777"

    @pytest.mark.asyncio
    async def test_never_matches_by_email(self, db):
        db.add(User(username="ada", email="ada@example.com", name="Ada", provider="local"))
        await db.flush()

        linked = await IdentityLinkingService(db).link_strava(
            tokens(), athlete(email="ada@example.com")
        )

        assert linked.created
        assert linked.user.email != "ada@example.com"

    @pytest.mark.asyncio
    async def test_attaches_to_signed_in_user(self, db):
        service = IdentityLinkingService(db)
        local = await service.signup_local(
            SignupRequest(username="carol", email="carol@example.com", name="Carol")
        )

        linked = await service.link_strava(tokens(), athlete(), current_user=local.user)

        assert not linked.created
        assert linked.user.id == local.user.id
        assert linked.user.strava_id == 777
        assert linked.user.strava_connected
        assert linked.user.email == "carol@example.com"
        assert await count_users(db) == 1

    @pytest.mark.asyncio
    async def test_switching_athlete_is_logged(self, db, caplog):
        service = IdentityLinkingService(db)
        local = await service.signup_local(
            SignupRequest(username="carol", email="carol@example.com", name="Carol")
        )
        await service.link_strava(tokens(access="first"), athlete(id=777), current_user=local.user)

        with caplog.at_level("WARNING", logger="ridegroups.features.auth.resolvers"):
            linked = await service.link_strava(
                tokens(access="second"), athlete(id=888), current_user=local.user
            )

        assert linked.user.strava_id == 888
        assert linked.user.strava_access_token == "second"
        assert "777 -> 888" in caplog.text


class TestStravaKnownAthlete:
    @pytest.mark.asyncio
    async def test_updates_tokens_never_creates(self, db):
        existing = User(
            username="ada",
            email="ada@example.com",
            name="Countess",
            avatar="https://example.com/own.png",
            provider="local",
            strava_id=777,
            strava_access_token="old-access",
            strava_refresh_token="old-refresh",
            strava_token_expiry=1,
        )
        db.add(existing)
        await db.flush()

        linked = await IdentityLinkingService(db).link_strava(tokens(), athlete())

        user = linked.user
        assert not linked.created
        assert user.id == existing.id
        assert user.provider == "strava"
        assert user.strava_access_token == "new-access"
        assert user.strava_refresh_token == "new-refresh"
        assert user.strava_token_expiry == 1900000000
        # profile data kept
        assert user.avatar == "https://example.com/own.png"
        assert user.name == "Countess"
        assert await count_users(db) == 1

    @pytest.mark.asyncio
    async def test_fills_missing_avatar(self, db):
        db.add(User(email="ada@example.com", name="Ada", provider="strava", strava_id=777))
        await db.flush()

        linked = await IdentityLinkingService(db).link_strava(tokens(), athlete())

        assert linked.user.avatar == "https://strava.example/ada.jpg"


class TestResolverRegistry:
    @pytest.mark.asyncio
    async def test_lookup_by_provider(self, db):
        resolver = get_resolver("google", db)
        assert resolver.provider.value == "google"

    def test_unknown_provider(self):
        with pytest.raises(KeyError):
            get_resolver("facebook", None)

    @pytest.mark.asyncio
    async def test_unique_username_suffixes(self, db):
        repo = UserRepository(db)
        db.add_all([
            User(username="rider", email="r1@example.com", name="R", provider="local"),
            User(username="rider2", email="r2@example.com", name="R", provider="local"),
        ])
        await db.flush()

        assert await repo.unique_username("rider") == "rider3"
        assert await repo.unique_username("") == "rider3"
