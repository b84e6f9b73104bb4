"""Tests for the pipeline building blocks: splitting, guarding, middleware, answers."""

import asyncio

import pytest
from assistant.diagnostics import DiagnosticTracer
from assistant.guard import (
    INVALID_INPUT,
    LENGTH_EXCEEDED,
    SCRIPT_INJECTION,
    SQL_INJECTION,
    SecurityGuard,
)
from assistant.middleware import MiddlewareManager
from assistant.response import ResponseComposer, format_currency
from assistant.splitter import CompoundSplitter
from linguistics.preprocessor import PreprocessingEngine
from models.catalog import CatalogItem
from models.results import SearchResult


@pytest.fixture
def splitter():
    return CompoundSplitter()


@pytest.fixture
def guard():
    return SecurityGuard()


@pytest.fixture
def composer():
    return ResponseComposer()


@pytest.fixture
def attributes(provider):
    return PreprocessingEngine(provider=provider).extract_attributes


# ── Compound Splitter ─────────────────────────────────

class TestSplitter:
    def test_single_query(self, splitter):
        assert splitter.split("harga iphone") == ["harga iphone"]

    def test_conjunction(self, splitter):
        assert splitter.split("harga iphone dan beli samsung") == ["harga iphone", "beli samsung"]

    def test_punctuation(self, splitter):
        assert splitter.split("harga iphone? fiturnya apa") == ["harga iphone", "fiturnya apa"]

    def test_trigger_category_change(self, splitter):
        assert splitter.split("beli iphone harga samsung") == ["beli iphone", "harga samsung"]

    def test_same_category_stays_together(self, splitter):
        assert splitter.split("harga biaya iphone") == ["harga biaya iphone"]

    def test_conjunction_inside_word_ignored(self, splitter):
        assert splitter.split("pandangan iphone") == ["pandangan iphone"]

    def test_empty(self, splitter):
        assert splitter.split("") == []
        assert splitter.split(" ? ") == []


# ── Security Guard ────────────────────────────────────

class TestGuard:
    def test_clean_input(self, guard):
        result = guard.process("harga iphone")
        assert result.is_valid
        assert result.sanitized == "harga iphone"
        assert result.threats == []

    def test_script_rejected(self, guard):
        result = guard.process("<script>alert(1)</script> harga")
        assert not result.is_valid
        assert SCRIPT_INJECTION in result.threats
        assert "<script>" not in result.sanitized

    def test_sql_rejected(self, guard):
        result = guard.process("select * from users")
        assert not result.is_valid
        assert result.threats == [SQL_INJECTION]

    def test_strict_mode_blanks_sql(self):
        result = SecurityGuard(strict_mode=True).process("1=1 harga")
        assert result.sanitized == ""

    def test_overlong_input_truncated(self):
        result = SecurityGuard(max_length=10).process("harga iphone 15 pro")
        assert result.is_valid
        assert result.threats == [LENGTH_EXCEEDED]
        assert result.sanitized == "harga ipho"

    def test_html_stripped(self, guard):
        result = guard.process("<b>harga</b> iphone")
        assert result.is_valid
        assert result.sanitized == "harga iphone"

    def test_allowed_tags(self):
        result = SecurityGuard(allowed_tags=["b"]).process("<b>harga</b> <i>iphone</i>")
        assert result.sanitized == "<b>harga</b> iphone"

    def test_control_characters_removed(self, guard):
        assert guard.process("harga\x00 iphone").sanitized == "harga iphone"

    def test_invalid_input(self, guard):
        assert guard.process(None).threats == [INVALID_INPUT]
        assert not guard.is_safe("")


# ── Middleware ────────────────────────────────────────

class TestMiddleware:
    def test_request_chain_rewrites_in_order(self):
        manager = MiddlewareManager()

        async def lower(ctx, call_next):
            ctx.query = ctx.query.lower()
            await call_next()

        async def suffix(ctx, call_next):
            ctx.query += " pro"
            await call_next()

        manager.use_request(lower)
        manager.use_request(suffix)
        ctx = asyncio.run(manager.execute_request("IPHONE", "s1"))
        assert ctx.query == "iphone pro"
        assert ctx.original_query == "IPHONE"
        assert ctx.session_id == "s1"

    def test_stop_short_circuits(self):
        manager = MiddlewareManager()
        calls = []

        async def stopper(ctx, call_next):
            ctx.stop = True
            await call_next()

        async def never(ctx, call_next):
            calls.append("never")
            await call_next()

        manager.use_request(stopper)
        manager.use_request(never)
        ctx = asyncio.run(manager.execute_request("harga"))
        assert ctx.stop
        assert calls == []

    def test_failing_middleware_skipped(self):
        manager = MiddlewareManager()

        async def broken(ctx, call_next):
            raise RuntimeError("boom")

        async def tag(ctx, call_next):
            ctx.metadata["tagged"] = True
            await call_next()

        manager.use_request(broken)
        manager.use_request(tag)
        ctx = asyncio.run(manager.execute_request("harga"))
        assert ctx.metadata == {"tagged": True}

    def test_failure_after_call_next_does_not_rerun_chain(self):
        manager = MiddlewareManager()
        calls = []

        async def late_failure(ctx, call_next):
            await call_next()
            raise RuntimeError("after")

        async def count(ctx, call_next):
            calls.append(1)
            await call_next()

        manager.use_request(late_failure)
        manager.use_request(count)
        asyncio.run(manager.execute_request("harga"))
        assert calls == [1]

    def test_response_middleware(self):
        manager = MiddlewareManager()

        async def annotate(result, ctx, call_next):
            result.answer = f"{result.answer} (via {ctx.session_id})"
            await call_next()

        manager.use_response(annotate)

        async def run():
            ctx = await manager.execute_request("harga", "s1")
            return await manager.execute_response(SearchResult(answer="ok"), ctx)

        assert asyncio.run(run()).answer == "ok (via s1)"


# ── Response Composer ─────────────────────────────────

class TestResponse:
    def test_format_currency(self):
        assert format_currency(20_000_000) == "Rp 20.0Jt"
        assert format_currency(150_000) == "Rp 150.000"
        assert format_currency(150_000, "$", "en-US") == "$ 150,000"

    def test_price_answer_with_recommendation(self, composer, attributes, iphone):
        answer = composer.compose(SearchResult(results=[iphone]), "sales_harga", False, attributes)
        assert answer == "Harga iPhone 15 Pro adalah Rp 20.0Jt. Produk ini sangat direkomendasikan!"

    def test_price_uses_sale_price(self, composer, attributes, samsung):
        answer = composer.compose(SearchResult(results=[samsung]), "sales_harga", False, attributes)
        assert answer == "Harga Samsung Galaxy S24 adalah Rp 13.5Jt"

    def test_features_answer(self, composer, attributes, iphone):
        answer = composer.compose(SearchResult(results=[iphone]), "sales_fitur", False, attributes)
        assert answer.startswith("Fitur iPhone 15 Pro meliputi: kamera 48MP, chip A17 Pro")

    def test_assembled_description(self, composer, attributes, shipping_page):
        answer = composer.compose(SearchResult(results=[shipping_page]), "fuzzy", False, attributes)
        assert answer.startswith("**Kebijakan Pengiriman** adalah Page.")
        assert "2 sampai 5 hari kerja" in answer

    def test_canned_answer(self, composer, attributes):
        faq = CatalogItem(title="Jam Buka", answer="Kami buka setiap hari 08.00-21.00.")
        answer = composer.compose(SearchResult(results=[faq]), "fuzzy", False, attributes)
        assert answer == "Kami buka setiap hari 08.00-21.00."

    def test_no_results(self, composer, attributes):
        answer = composer.compose(SearchResult(), "fuzzy", False, attributes)
        assert answer == "Maaf, saya tidak menemukan informasi tersebut."

    def test_conversational_fallback(self, composer, attributes):
        answer = composer.compose(SearchResult(), "chat_greeting", True, attributes)
        assert answer.startswith("Halo!")
        assert composer.compose(SearchResult(), "chat_unknown", True, attributes) is None

    def test_price_template_override(self, attributes, iphone):
        composer = ResponseComposer(answer_templates={"price": "{title}: {price}"})
        answer = composer.compose(SearchResult(results=[iphone]), "sales_harga", False, attributes)
        assert answer.startswith("iPhone 15 Pro: Rp 20.0Jt.")

    def test_template_override(self, attributes, iphone):
        composer = ResponseComposer(answer_templates={"recommended": "Pilihan terbaik!"})
        answer = composer.compose(SearchResult(results=[iphone]), "sales_beli", False, attributes)
        assert answer.endswith(". Pilihan terbaik!")


# ── Diagnostics ───────────────────────────────────────

class TestDiagnostics:
    def test_phases_recorded_in_completion_order(self):
        tracer = DiagnosticTracer()
        tracer.start("outer")
        tracer.start("inner")
        tracer.stop("inner")
        tracer.stop("outer", {"ok": True})
        tracer.record("marker")
        assert [e.id for e in tracer.events] == ["inner", "outer", "marker"]
        assert tracer.events[1].meta == {"ok": True}
        assert tracer.events[0].duration >= 0
        assert tracer.events[2].duration is None

    def test_stop_without_start_ignored(self):
        tracer = DiagnosticTracer()
        tracer.stop("missing")
        assert tracer.events == []
