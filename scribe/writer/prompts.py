"""
Writing Assistant Prompts

Maps every action tag to its fixed system prompt and user prompt template.
Templates are filled with str.format using the request's text, context and
prompt fields.
"""

from typing import Optional, Dict, Tuple

from .errors import InvalidActionError


# =============================================================================
# Writing Assistant Actions
# =============================================================================

WRITING_ACTIONS: Dict[str, Dict[str, str]] = {
    "autocomplete": {
        "system": (
            "You are a creative writing assistant for novelists. Continue the story "
            "naturally in the author's style. Write 1-2 sentences that flow seamlessly "
            "from the context."
        ),
        "user": "Context:\n{context}\n\nContinue writing from here naturally:",
    },
    "rewrite-suspenseful": {
        "system": (
            "You are a creative writing expert. Rewrite the given text to be more "
            "suspenseful, adding tension and intrigue."
        ),
        "user": "Rewrite this to be more suspenseful:\n\n{text}",
    },
    "rewrite-show": {
        "system": (
            "You are a creative writing expert. Rewrite the given text using "
            "\"show, don't tell\" technique - use sensory details and actions instead "
            "of stating emotions directly."
        ),
        "user": "Rewrite this using \"show, don't tell\":\n\n{text}",
    },
    "rewrite-dialogue": {
        "system": (
            "You are a creative writing expert. Rewrite the dialogue to be more "
            "natural, authentic, and character-driven."
        ),
        "user": "Make this dialogue more natural:\n\n{text}",
    },
    "generate-scene": {
        "system": (
            "You are a creative writing assistant. Generate vivid, atmospheric scene "
            "descriptions based on prompts. Write 2-3 paragraphs."
        ),
        "user": "{prompt}",
    },
    "summarize": {
        "system": (
            "You are a writing assistant. Provide a concise, clear summary of the "
            "chapter highlighting key plot points and character development."
        ),
        "user": "Summarize this chapter:\n\n{text}",
    },
    "chat": {
        "system": (
            "You are a creative writing coach and novel development assistant. Help the "
            "author with plot development, character arcs, world-building, pacing, "
            "themes, and any other aspect of their novel. Be encouraging, insightful, "
            "and ask thoughtful questions to help them develop their story."
        ),
        "user": "{prompt}",
    },
    "generate-character": {
        "system": (
            "You are a creative writing assistant specializing in character development. "
            "Generate detailed, nuanced character profiles that feel authentic and "
            "three-dimensional."
        ),
        "user": (
            "Create a detailed character profile for: {text}\n\n"
            "Context: {context}\n\n"
            "Provide a JSON response with the following fields:\n"
            "- personality: A detailed description of their traits, quirks, and behavioral patterns\n"
            "- background: Their history, key life events, and how it shaped them\n"
            "- description: Physical appearance and how they present themselves\n\n"
            "Make the character feel real and multi-dimensional."
        ),
    },
}


# =============================================================================
# Editorial Analysis (action tags prefixed "editor-")
# =============================================================================

EDITOR_PREFIX = "editor-"

EDITORIAL_ANALYSES: Dict[str, Dict[str, str]] = {
    "plot": {
        "system": (
            "You are an experienced book editor specializing in plot structure and "
            "narrative consistency. Provide detailed, constructive feedback on plot "
            "elements, pacing, and story structure."
        ),
        "focus": (
            "Please analyze the plot of this manuscript. Focus on:\n"
            "- Plot consistency and logic\n- Story structure and arc\n- Pacing and tension\n"
            "- Plot holes or inconsistencies\n- Narrative flow"
        ),
    },
    "characters": {
        "system": (
            "You are an experienced book editor specializing in character development. "
            "Provide detailed, constructive feedback on character arcs, consistency, and depth."
        ),
        "focus": (
            "Please analyze the characters in this manuscript. Focus on:\n"
            "- Character development and arcs\n- Character consistency\n"
            "- Dialogue authenticity\n- Character motivations\n- Relationships between characters"
        ),
    },
    "pacing": {
        "system": (
            "You are an experienced book editor specializing in narrative pacing and flow. "
            "Provide detailed, constructive feedback on pacing, rhythm, and reader engagement."
        ),
        "focus": (
            "Please analyze the pacing of this manuscript. Focus on:\n"
            "- Overall pacing and rhythm\n- Scene transitions\n- Tension and release\n"
            "- Reader engagement\n- Areas that feel rushed or slow"
        ),
    },
    "style-consistency": {
        "system": (
            "You are an experienced line editor who checks a manuscript for consistent "
            "style. Point out concrete passages and suggest fixes."
        ),
        "focus": (
            "Please check this manuscript for style consistency. Focus on:\n"
            "- Tense and point-of-view slips\n- Formatting of dialogue and thoughts\n"
            "- Spelling and naming variants\n- Shifts in sentence length and register"
        ),
    },
    "voice-consistency": {
        "system": (
            "You are an experienced book editor specializing in narrative and character "
            "voice. Identify where voices drift and how to bring them back."
        ),
        "focus": (
            "Please analyze the consistency of voice in this manuscript. Focus on:\n"
            "- Narrator voice across chapters\n- Distinctness of each character's speech\n"
            "- Vocabulary that breaks a character's established voice\n"
            "- Passages where the author's voice intrudes"
        ),
    },
    "tone-mood": {
        "system": (
            "You are an experienced book editor specializing in tone and atmosphere. "
            "Provide detailed, constructive feedback on how the prose builds mood."
        ),
        "focus": (
            "Please analyze the tone and mood of this manuscript. Focus on:\n"
            "- The dominant tone of each section\n- Tonal shifts and whether they are earned\n"
            "- Use of setting and imagery to build atmosphere\n- Fit between tone and genre"
        ),
    },
    "grammar-style": {
        "system": (
            "You are a meticulous copy editor. Identify grammar, punctuation and usage "
            "problems and weak stylistic habits, quoting the affected passages."
        ),
        "focus": (
            "Please copy-edit this manuscript. Focus on:\n"
            "- Grammar and punctuation errors\n- Word choice and repetition\n"
            "- Overuse of adverbs and passive voice\n- Awkward or run-on sentences"
        ),
    },
    "overall": {
        "system": (
            "You are an experienced book editor providing comprehensive editorial feedback. "
            "Provide detailed, constructive feedback covering all aspects of the manuscript."
        ),
        "focus": (
            "Please provide comprehensive editorial feedback on this manuscript. Cover:\n"
            "- Strengths and weaknesses\n- Plot and structure\n- Character development\n"
            "- Writing style and voice\n- Pacing and flow\n- Suggestions for improvement"
        ),
    },
}

REWRITE_ACTIONS = {
    "suspenseful": "rewrite-suspenseful",
    "show": "rewrite-show",
    "dialogue": "rewrite-dialogue",
}

DEFAULT_SCENE_PROMPT = "Generate a vivid scene description"
DEFAULT_CHAT_PROMPT = "Hello!"


def available_actions() -> list[str]:
    """Every action tag the writer accepts."""
    return list(WRITING_ACTIONS) + [f"{EDITOR_PREFIX}{kind}" for kind in EDITORIAL_ANALYSES]


def build_prompts(
    action: str,
    text: Optional[str] = None,
    context: Optional[str] = None,
    prompt: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Resolve an action tag into (system prompt, user prompt).

    Raises:
        InvalidActionError: If the action is not recognized
    """
    text = text or ""
    context = context or ""

    if action.startswith(EDITOR_PREFIX):
        analysis = EDITORIAL_ANALYSES.get(action[len(EDITOR_PREFIX):])
        if analysis is None:
            raise InvalidActionError("Invalid editor action")
        return analysis["system"], f"{analysis['focus']}\n\nManuscript:\n{text}"

    template = WRITING_ACTIONS.get(action)
    if template is None:
        raise InvalidActionError("Invalid action")

    if action == "generate-scene":
        prompt = prompt or DEFAULT_SCENE_PROMPT
    elif action == "chat":
        prompt = prompt or text or DEFAULT_CHAT_PROMPT

    user = template["user"].format(text=text, context=context, prompt=prompt or "")
    return template["system"], user
