"""
Onboarding screens.

Pure mapping from (step, form) to the HTML shown for that step.
No state changes happen here.
"""

import re
from dataclasses import dataclass
from html import escape

from .state import OnboardingForm, OnboardingStep


_FORM_TAG = re.compile(r"<form\b[^>]*>")


@dataclass
class Screen:
    """One rendered wizard screen."""
    step: OnboardingStep
    title: str
    lead: str
    body: str = ""


def welcome_screen() -> Screen:
    return Screen(
        step=OnboardingStep.WELCOME,
        title="Thanks for using our service! Let's get things out of the way.",
        lead=(
            "You'll be prompted some questions about what you exactly want. From your "
            "thinking of the project, to the files you want to share with us."
        ),
        body=(
            '<form method="post" action="/onboarding/start">'
            '<button class="btn btn-primary" type="submit">Get Started</button>'
            "</form>"
        ),
    )


def name_screen(form: OnboardingForm) -> Screen:
    return Screen(
        step=OnboardingStep.NAME,
        title="Who are you?",
        lead=(
            "We want to know who you are so we can get in touch with you. "
            "And will be stored in our database."
        ),
        body=(
            '<form method="post" action="/onboarding/name">'
            '<input type="text" name="name" placeholder="John Doe" '
            f'value="{escape(form.name)}">'
            '<button class="btn btn-primary" type="submit">Next</button>'
            "</form>"
        ),
    )


def request_screen(form: OnboardingForm) -> Screen:
    # The Next button stays hidden until there is some request text.
    hidden = "" if form.request else " hidden"

    return Screen(
        step=OnboardingStep.REQUEST,
        title="What is your thinking?",
        lead=(
            "We want to know what you want, what you're thinking, "
            "and what you're not thinking."
        ),
        body=(
            '<form method="post" action="/onboarding/request">'
            '<textarea name="request" '
            "oninput=\"this.form.querySelector('button').hidden = !this.value\" "
            'placeholder="I want a website that does... '
            f'The vibe I want... I want it to look like...">{escape(form.request)}</textarea>'
            f'<button class="btn btn-primary" type="submit"{hidden}>Next</button>'
            "</form>"
        ),
    )


def files_screen(form: OnboardingForm) -> Screen:
    items = []
    for url in form.files:
        safe = escape(url, quote=True)
        items.append(
            "<li>"
            f'<img src="{safe}" alt="file">'
            '<form method="post" action="/onboarding/files/remove">'
            f'<input type="hidden" name="url" value="{safe}">'
            '<button class="btn btn-ghost btn-xs" type="submit">Remove</button>'
            "</form>"
            "</li>"
        )

    return Screen(
        step=OnboardingStep.FILES,
        title="Upload your files.",
        lead=(
            "You can upload any files you want to share with us. From branding assets, "
            "to reference images. We'll be able to see them and download them."
        ),
        body=(
            '<form method="post" action="/onboarding/files" enctype="multipart/form-data">'
            '<input type="file" name="upload">'
            '<button class="btn" type="submit">Upload</button>'
            "</form>"
            f'<ul class="files">{"".join(items)}</ul>'
            '<form method="post" action="/onboarding/finish">'
            '<button class="btn btn-primary" type="submit">Next</button>'
            "</form>"
        ),
    )


def thanks_screen(home_url: str) -> Screen:
    return Screen(
        step=OnboardingStep.THANKS,
        title="Thank you, we should have everything we need!",
        lead=(
            "Catch you in a few days, we'll be in touch with you soon. "
            "If you have any questions, feel free to reach out to us!"
        ),
        body=f'<a class="btn btn-primary" href="{escape(home_url, quote=True)}">Go back home</a>',
    )


def render(step: OnboardingStep | str | None, form: OnboardingForm, home_url: str = "/") -> Screen:
    """Pick the screen for a step. Anything unknown gets the welcome screen."""
    if step == OnboardingStep.NAME:
        return name_screen(form)
    if step == OnboardingStep.REQUEST:
        return request_screen(form)
    if step == OnboardingStep.FILES:
        return files_screen(form)
    if step == OnboardingStep.THANKS:
        return thanks_screen(home_url)
    return welcome_screen()


def render_page(screen: Screen, session_id: str) -> str:
    """Wrap a screen in a full HTML document."""
    hidden = f'<input type="hidden" name="session_id" value="{escape(session_id, quote=True)}">'
    # User text is escaped, so every <form> tag here is one of ours.
    body = _FORM_TAG.sub(lambda m: m.group(0) + hidden, screen.body)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(screen.title)}</title>
</head>
<body data-step="{screen.step.value}">
    <main>
        <h1>{escape(screen.title)}</h1>
        <p class="lead">{escape(screen.lead)}</p>
        {body}
    </main>
</body>
</html>
"""
