"""
Wireframe prompt builders.

Each builder prepends a fixed rules block to the caller's screen
description. The tree rules list exactly the element vocabulary the
validator accepts, so the prompt and the schema cannot drift apart.
"""

import json
from typing import Dict

from ..models.documents import ParsedScreen
from ..models.wireframe import ElementType, ICON_NAMES


ELEMENT_DESCRIPTIONS: Dict[ElementType, str] = {
    ElementType.HEADER: "Barre d'en-tête avec logo/titre",
    ElementType.NAV: "Navigation (menu, liens)",
    ElementType.BUTTON: "Bouton d'action",
    ElementType.INPUT: "Champ de saisie",
    ElementType.TEXT: "Bloc de texte",
    ElementType.IMAGE: "Zone d'image",
    ElementType.CARD: "Carte contenant d'autres éléments",
    ElementType.LIST: "Liste d'éléments répétitifs",
    ElementType.CONTAINER: "Conteneur générique",
    ElementType.FORM: "Formulaire groupant inputs",
    ElementType.TABLE: "Tableau de données",
    ElementType.MODAL: "Fenêtre modale",
    ElementType.TABS: "Onglets de navigation",
    ElementType.SIDEBAR: "Barre latérale",
    ElementType.AVATAR: "Photo de profil circulaire",
    ElementType.BADGE: "Badge/étiquette colorée",
    ElementType.ICON: "Icône (specify name: " + ", ".join(ICON_NAMES) + ")",
    ElementType.DIVIDER: "Séparateur horizontal",
    ElementType.PROGRESS: "Barre de progression",
    ElementType.TOGGLE: "Interrupteur on/off",
    ElementType.CHECKBOX: "Case à cocher",
    ElementType.RADIO: "Bouton radio",
    ElementType.SELECT: "Liste déroulante",
    ElementType.TEXTAREA: "Zone de texte multiligne",
}

TREE_EXAMPLE = {
    "screens": [
        {
            "id": "screen_1",
            "name": "Nom de l'écran",
            "description": "Description courte de l'écran",
            "route": "/chemin-url",
            "elements": [
                {
                    "id": "el_1",
                    "type": "header",
                    "label": "MonApp",
                    "props": {"color": "primary"},
                    "children": [
                        {
                            "id": "el_2",
                            "type": "button",
                            "label": "Connexion",
                            "props": {"variant": "outline", "size": "sm"},
                        }
                    ],
                },
                {
                    "id": "el_3",
                    "type": "container",
                    "props": {"padding": "lg"},
                    "children": [
                        {
                            "id": "el_4",
                            "type": "text",
                            "label": "Bienvenue sur notre plateforme",
                            "props": {"size": "xl", "weight": "bold"},
                        },
                        {
                            "id": "el_5",
                            "type": "form",
                            "children": [
                                {
                                    "id": "el_6",
                                    "type": "input",
                                    "label": "Email",
                                    "placeholder": "votre@email.com",
                                    "props": {"type": "email"},
                                },
                                {
                                    "id": "el_7",
                                    "type": "button",
                                    "label": "Se connecter",
                                    "props": {"variant": "primary", "size": "lg", "fullWidth": True},
                                },
                            ],
                        },
                    ],
                },
            ],
        }
    ]
}


def _vocabulary_block() -> str:
    return "\n".join(
        f"   - {element_type.value}: {ELEMENT_DESCRIPTIONS[element_type]}"
        for element_type in ElementType
    )


WIREFRAME_PROMPT = f"""Tu es un expert UX/UI spécialisé dans la création de wireframes. À partir de la description d'écrans fournie, génère une structure JSON de wireframes détaillés et professionnels.

RÈGLES STRICTES:
1. Utilise UNIQUEMENT ces types d'éléments:
{_vocabulary_block()}

2. Chaque élément DOIT avoir un "id" unique dans son écran (format: "el_1", "el_2", etc.)

3. Contenu réaliste:
   - Textes réalistes et contextuels (pas de "Lorem ipsum")
   - Labels descriptifs pour chaque élément
   - Couleurs via props.color: "primary" | "secondary" | "success" | "warning" | "danger" | "info" | "dark" | "light"
   - Tailles via props.size: "xs" | "sm" | "md" | "lg" | "xl"

4. Organise logiquement: header en haut, nav, puis contenu principal

5. Utilise "children" pour imbriquer les éléments (header, nav, card, container, form, modal, tabs, sidebar)

6. Pour les listes, utilise "items" avec des données réalistes:
   "items": [
     {{ "title": "Titre item", "subtitle": "Description", "image": true }}
   ]

FORMAT DE SORTIE (JSON STRICT, pas de texte avant/après):
{json.dumps(TREE_EXAMPLE, indent=2, ensure_ascii=False)}

IMPORTANT:
- Réponds UNIQUEMENT avec le JSON, sans aucun texte explicatif avant ou après.
- La clé racine "screens" DOIT être un tableau.
- Génère des contenus RÉALISTES et CONTEXTUELS basés sur la description fournie.

DESCRIPTION DES ÉCRANS À CONVERTIR EN WIREFRAMES:
"""


HTML_ICONS = {
    "Menu": '<svg class="w-6 h-6" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M4 6h16M4 12h16M4 18h16"/></svg>',
    "Back": '<svg class="w-6 h-6" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M15 19l-7-7 7-7"/></svg>',
    "Search": '<svg class="w-5 h-5" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M21 21l-6-6m2-5a7 7 0 11-14 0 7 7 0 0114 0z"/></svg>',
    "Plus": '<svg class="w-6 h-6" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M12 4v16m8-8H4"/></svg>',
    "User": '<svg class="w-6 h-6" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M16 7a4 4 0 11-8 0 4 4 0 018 0zM12 14a7 7 0 00-7 7h14a7 7 0 00-7-7z"/></svg>',
    "Check": '<svg class="w-5 h-5" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M5 13l4 4L19 7"/></svg>',
    "Home": '<svg class="w-6 h-6" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M3 12l2-2m0 0l7-7 7 7M5 10v10a1 1 0 001 1h3m10-11l2 2m-2-2v10a1 1 0 01-1 1h-3m-6 0a1 1 0 001-1v-4a1 1 0 011-1h2a1 1 0 011 1v4a1 1 0 001 1m-6 0h6"/></svg>',
    "Heart": '<svg class="w-6 h-6" fill="none" stroke="currentColor" viewBox="0 0 24 24"><path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M4.318 6.318a4.5 4.5 0 000 6.364L12 20.364l7.682-7.682a4.5 4.5 0 00-6.364-6.364L12 7.636l-1.318-1.318a4.5 4.5 0 00-6.364 0z"/></svg>',
    "Star": '<svg class="w-5 h-5 text-yellow-400 fill-current" viewBox="0 0 24 24"><path d="M12 2l3.09 6.26L22 9.27l-5 4.87 1.18 6.88L12 17.77l-6.18 3.25L7 14.14 2 9.27l6.91-1.01L12 2z"/></svg>',
}

HTML_PLACEHOLDERS = {
    "Avatar": '<div class="w-10 h-10 rounded-full bg-gradient-to-br from-blue-400 to-purple-500"></div>',
    "Image": '<div class="w-full h-40 rounded-lg bg-gradient-to-br from-gray-200 to-gray-300 flex items-center justify-center text-gray-400">Image</div>',
}


def _catalogue(entries: Dict[str, str]) -> str:
    return "\n".join(f"- {name}: {markup}" for name, markup in entries.items())


HTML_WIREFRAME_PROMPT = f"""Tu es un expert UI/UX et développeur front-end senior. Génère du code HTML avec Tailwind CSS pour créer une maquette d'écran mobile-first professionnelle et réaliste.

RÈGLES STRICTES:
1. Génère UNIQUEMENT le contenu HTML (pas de <!DOCTYPE>, <html>, <head>, <body>)
2. Utilise Tailwind CSS pour tous les styles
3. Design mobile-first (max-width: 390px simulé)
4. Utilise des couleurs modernes et cohérentes
5. Inclus des données réalistes (pas de Lorem ipsum)
6. Structure claire et hiérarchique

PALETTE DE COULEURS:
- Primary: bg-blue-600, text-blue-600
- Secondary: bg-gray-100, text-gray-600
- Success: bg-green-500
- Danger: bg-red-500
- Background: bg-white, bg-gray-50

COMPOSANTS COURANTS:
- Header: sticky top-0, shadow-sm, bg-white
- Cards: rounded-xl, shadow-md, p-4
- Buttons: rounded-lg, font-medium, px-4 py-2
- Inputs: rounded-lg, border, px-3 py-2
- Lists: divide-y, divide-gray-100

ICÔNES (utilise ces SVG inline):
{_catalogue(HTML_ICONS)}

IMAGES PLACEHOLDER:
{_catalogue(HTML_PLACEHOLDERS)}

FORMAT DE RÉPONSE:
Réponds UNIQUEMENT avec le code HTML, sans explication ni markdown. Pas de ```html, juste le HTML pur.

DESCRIPTION DE L'ÉCRAN:"""


PREVIEW_STYLE_RULES = """
Style:
- Palette de couleurs moderne (bleu/indigo comme accent)
- Typographie claire et lisible
- Espacement généreux
- Ombres subtiles et bordures arrondies
- Icônes Lucide React pour les actions
"""


def build_wireframe_prompt(screen_content: str) -> str:
    """Prompt for the JSON element-tree generator."""
    return WIREFRAME_PROMPT + screen_content


def build_html_wireframe_prompt(screen_content: str) -> str:
    """Prompt for the HTML markup generator."""
    return HTML_WIREFRAME_PROMPT + "\n\n" + screen_content


def build_preview_prompt(screen: ParsedScreen) -> str:
    """
    Prompt for the hosted UI preview generator.

    Args:
        screen: Screen recovered by the permissive parser

    Returns:
        Prompt listing the screen's name, description and elements
    """
    prompt = (
        f'Crée une interface utilisateur moderne et professionnelle pour: "{screen.name}"\n'
        f"\n"
        f"Description: {screen.description}\n"
        f"\n"
        f"Exigences:\n"
        f"- Utilise React avec Tailwind CSS\n"
        f"- Design moderne, épuré et professionnel\n"
        f"- Responsive (mobile-first)\n"
        f"- Accessibilité (ARIA labels, contraste)\n"
        f"- Utilise des composants shadcn/ui si pertinent\n"
    )

    if screen.elements:
        elements = "\n".join(f"- {e}" for e in screen.elements)
        prompt += f"\nÉléments à inclure:\n{elements}\n"

    prompt += PREVIEW_STYLE_RULES
    return prompt
