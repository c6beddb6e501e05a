"""Static catalog of document templates.

Template bodies use the document's block markers: ``# `` for a title,
``- `` for list items, one block per line.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    description: str
    blocks: List[str]

    @property
    def text(self) -> str:
        return "\n".join(self.blocks)


LEGAL_TEMPLATES: List[Template] = [
    Template(
        id="i-140-cover",
        name="Form I-140 Cover Letter",
        description="Immigrant Petition for Alien Worker cover letter structure.",
        blocks=[
            "# COVER LETTER: FORM I-140 PETITION",
            "January 9, 2026",
            "USCIS, Attn: I-140 Premium Processing Case, P.O. Box 660867, Dallas, TX 75266",
            "RE: Immigrant Petition for Alien Worker (Form I-140). "
            "Petitioner: OpenSphere Immigration Services. Beneficiary: [Candidate Name]",
            "Dear Immigration Officer,",
            "This letter is submitted in support of the Form I-140 petition filed by "
            "OpenSphere Immigration Services on behalf of the Beneficiary for the "
            "position of Senior Legal Architect. After thorough internal review, we have "
            "determined that the Beneficiary qualifies as an individual of extraordinary "
            "ability based on the following criteria:",
            "- Significant contributions to the field of legal workflow automation.",
            "- Peer-reviewed publications in major judicial technology journals.",
            "- Lead consultancy roles in multi-national document compliance projects.",
            "We kindly request your review of the enclosed documentation. Please do not "
            "hesitate to reach out if additional evidence is required for your "
            "determination.",
            "Sincerely,",
            "[Principal Partner Name], OpenSphere Immigration Services",
        ],
    ),
    Template(
        id="support-letter",
        name="General Support Letter",
        description="A standard framework for expert support and recommendation letters.",
        blocks=[
            "# LETTER OF SUPPORT",
            "Date: [Current Date]",
            "To Whom It May Concern,",
            "I am writing this letter to express my strong support for [Name of "
            "Applicant] in their application for [Type of Visa/Benefit]. Having worked "
            "closely with the applicant for [Number] years in my capacity as [Your "
            "Position], I can personally attest to their professional excellence and "
            "high standing in the field of [Field].",
            "During their tenure at [Organization], [Name of Applicant] demonstrated "
            "exceptional skills in:",
            "- [Achievement/Skill 1]",
            "- [Achievement/Skill 2]",
            "- [Achievement/Skill 3]",
            "The applicant's work has had a significant impact on our operations, "
            "particularly [Specific Example]. Their removal or absence would constitute "
            "a significant loss to the industry.",
            "I recommend [Name of Applicant] without reservation.",
            "Respectfully submitted,",
            "[Your Signature], [Your Formal Title]",
        ],
    ),
    Template(
        id="blank",
        name="Blank Document",
        description="A clean slate with standard legal margins and formatting.",
        blocks=["# [Title]", "Start drafting here..."],
    ),
]

NEW_DOCUMENT = ["# New Document", "Start typing..."]
WELCOME_DOCUMENT = [
    "# Untitled Legal Document",
    "Start drafting by choosing a template from the toolbar or begin typing here...",
]


def get_template(template_id: str) -> Optional[Template]:
    for template in LEGAL_TEMPLATES:
        if template.id == template_id:
            return template
    return None
