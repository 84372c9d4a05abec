"""
Tests for screen rendering.
"""

import pytest

from onboarding.screens import render, render_page
from onboarding.state import OnboardingForm, OnboardingStep


class TestRender:
    """Step -> screen mapping."""

    @pytest.mark.parametrize("step", list(OnboardingStep))
    def test_every_step_has_a_screen(self, step):
        assert render(step, OnboardingForm()).step == step

    @pytest.mark.parametrize("step", [None, "", "bogus"])
    def test_unknown_step_falls_back_to_welcome(self, step):
        screen = render(step, OnboardingForm())
        assert screen.step == OnboardingStep.WELCOME
        assert screen.title == render(OnboardingStep.WELCOME, OnboardingForm()).title

    def test_plain_string_step(self):
        assert render("files", OnboardingForm()).step == OnboardingStep.FILES

    def test_name_is_prefilled_and_escaped(self):
        screen = render(OnboardingStep.NAME, OnboardingForm(name='Ada "<b>"'))
        assert 'value="Ada &quot;&lt;b&gt;&quot;"' in screen.body

    def test_request_next_hidden_until_text(self):
        empty = render(OnboardingStep.REQUEST, OnboardingForm())
        filled = render(OnboardingStep.REQUEST, OnboardingForm(request="A site"))

        assert 'type="submit" hidden>Next' in empty.body
        assert 'type="submit">Next' in filled.body
        assert ">A site</textarea>" in filled.body

    def test_files_listed_with_remove_buttons(self):
        form = OnboardingForm(files=["https://store/a.png", "https://store/b.png"])
        screen = render(OnboardingStep.FILES, form)

        assert screen.body.count("Remove</button>") == 2
        assert '<img src="https://store/a.png"' in screen.body
        assert 'value="https://store/b.png"' in screen.body

    def test_thanks_links_home(self):
        screen = render(OnboardingStep.THANKS, OnboardingForm(), home_url="https://example.com")
        assert 'href="https://example.com"' in screen.body


class TestRenderPage:
    """Full HTML documents."""

    def test_session_id_added_to_every_form(self):
        form = OnboardingForm(files=["https://store/a.png"])
        html = render_page(render(OnboardingStep.FILES, form), "sess-1")

        # upload form + one remove form + finish form
        assert html.count('name="session_id" value="sess-1"') == 3
        assert 'data-step="files"' in html

    def test_user_text_cannot_inject_forms(self):
        form = OnboardingForm(request='<form action="/evil">')
        html = render_page(render(OnboardingStep.REQUEST, form), "sess-1")

        assert html.count('name="session_id"') == 1
        assert "&lt;form" in html

    def test_thanks_has_no_forms(self):
        html = render_page(render(OnboardingStep.THANKS, OnboardingForm()), "sess-1")
        assert 'name="session_id"' not in html
        assert "Thank you" in html
