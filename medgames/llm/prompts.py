"""Prompt builders and per-level module text."""

from typing import List, Sequence

from ..models.types import MedicationMention, ResolvedMedicationDetails

LEVELS = ("beginner", "intermediate", "advanced")

MODULE_TITLES = {
    "beginner": "Module 1: Healthcare Basics",
    "intermediate": "Module 2: Understanding Your Treatment",
    "advanced": "Module 3: Advanced Management",
}

MODULE_DESCRIPTIONS = {
    "beginner": "Learn basic terms and simple concepts about your health condition and medications.",
    "intermediate": "Understand your treatment plan, medication interactions, and monitoring requirements.",
    "advanced": "Master complex medication management, potential complications, and lifestyle optimization.",
}

ESTIMATED_TIMES = {
    "beginner": "5-10 minutes",
    "intermediate": "10-15 minutes",
    "advanced": "15-20 minutes",
}

DIFFICULTY_GUIDELINES = {
    "beginner": """
BEGINNER LEVEL Guidelines:
- Use simple, everyday words (avoid medical jargon)
- Focus on basic concepts: what the condition is, what the medication does
- Short sentences and simple questions
- Simple side effects and basic "take with food" type instructions
- Grid sizes: 5x5 for crossword, 6x6 for word search
- Multiple choice: obvious wrong answers
- True/false: straightforward facts""",
    "intermediate": """
INTERMEDIATE LEVEL Guidelines:
- Mix simple terms with some explained medical terminology
- Focus on understanding treatment plans and monitoring
- Include medication interactions, precautions and when to call the doctor
- Include IR vs ER formulation differences
- Grid sizes: 7x7 for crossword, 8x8 for word search
- Multiple choice: plausible distractors
- True/false: requires understanding concepts""",
    "advanced": """
ADVANCED LEVEL Guidelines:
- Use appropriate medical terminology
- Focus on complex medication management, interactions and contraindications
- Include monitoring parameters, dosing adjustments and titration
- IR vs ER pharmacokinetics understanding
- Grid sizes: 9x9 for crossword, 10x10 for word search
- Multiple choice: subtle differences between options
- True/false: requires deep understanding and critical thinking""",
}

GAME_TYPES = ("crossword", "wordsearch", "fillblank", "multiplechoice", "matching", "truefalse")

IR_DEFAULT_RULE = (
    "CRITICAL: Default ALL medications to IR (Immediate Release) unless explicitly "
    "stated as ER/XR/Extended-Release/sustained-release."
)


def build_medical_context(patient_info: str, results: Sequence[ResolvedMedicationDetails]) -> str:
    """Patient text followed by a short summary of each resolved label."""
    lines = [f"Patient Information:\n{patient_info}\n"]
    if results:
        lines.append("Medication Information from DailyMed:")
        for i, med in enumerate(results, 1):
            lines.append(f"\n{i}. {med.title}")
            if med.generic_name:
                lines.append(f"Generic Name: {med.generic_name}")
            if med.brand_name:
                lines.append(f"Brand Name: {med.brand_name}")
            if med.active_ingredients:
                lines.append(f"Active Ingredients: {', '.join(med.active_ingredients)}")
            lines.append(f"Indications: {med.indications[:200]}")
            lines.append(f"Side Effects: {med.adverse_reactions[:200]}")
            lines.append(f"Dosage: {med.dosage_and_administration[:200]}")
    return "\n".join(lines)


def extraction_prompt(patient_info: str) -> str:
    return f"""
You are a medical information extraction specialist. Extract medication information from the following patient text.

Patient Information:
{patient_info}

For each medication extract the generic name, the dosage with units, the delivery
method (tablet, capsule, inhaler, handihaler, injection, ...), the formulation and
the full sentence or phrase where it appears.

{IR_DEFAULT_RULE}

Return JSON with this structure:
{{
  "medications": [
    {{
      "name": "medication_name",
      "dosage": "amount with units",
      "formulation": "IR" | "ER",
      "deliveryMethod": "tablet/capsule/inhaler/etc",
      "fullContext": "sentence where this medication appears"
    }}
  ]
}}"""


def validation_prompt(
    patient_info: str,
    mentions: Sequence[MedicationMention],
    results: Sequence[ResolvedMedicationDetails],
) -> str:
    extracted = "\n".join(
        f"{i}. {m.name} ({m.delivery_method or 'unspecified'}) - Context: \"{m.full_context}\""
        for i, m in enumerate(mentions, 1)
    )
    found = "\n".join(
        f"{i}. {r.title} - Generic: {r.generic_name or 'N/A'}"
        for i, r in enumerate(results, 1)
    )
    return f"""
You are a medical validation specialist. Compare the original patient information with the
medications found in the DailyMed database.

Original Patient Information:
{patient_info}

Extracted Medications:
{extracted}

DailyMed Results Found:
{found}

Check that the results match the medications mentioned, that delivery methods are correct
(e.g. inhaler vs solution), and whether any medication is missing or wrong.

Return JSON with this structure:
{{
  "validated": true/false,
  "issues": ["list of any problems found"],
  "correctedSearchTerms": ["better search terms if needed"]
}}"""


def assessment_prompt(medical_context: str) -> str:
    return f"""
You are a healthcare education specialist. Analyze this patient information and recommend an appropriate learning level.

{medical_context}

New diagnoses suggest beginner level, long-term conditions intermediate or advanced.
Hospital stays and recent discharge suggest limited time.

Return JSON with this structure:
{{
  "patientConditions": ["condition1", "condition2"],
  "medicationFamiliarity": "new|some|experienced",
  "timeConstraints": "limited|moderate|extended",
  "preferredLearningStyle": "visual|text|interactive",
  "suggestedStartingLevel": "beginner|intermediate|advanced"
}}"""


def games_prompt(medical_context: str, level: str) -> str:
    types: List[str] = list(GAME_TYPES)
    return f"""
You are a healthcare education specialist creating {level}-level educational games for patients.

{medical_context}

{DIFFICULTY_GUIDELINES[level]}

Create exactly {len(types)} games, one of each type: {", ".join(types)}.
Use patient-friendly language, focus on medication names, side effects and care instructions,
and keep the content medically accurate.
{IR_DEFAULT_RULE}
Include the formulation type (IR vs ER) in medication references when relevant.

Return a JSON object {{"games": [...]}} where every game has "type", "title" and
"difficulty": "{level}" plus the fields its type needs (grid/clues, grid/words,
text/blanks/wordBank, questions, pairs, questions)."""


SIMPLIFY_SYSTEM = (
    "You are a healthcare communication specialist. Simplify medical text for patient education "
    "while maintaining accuracy. Use simple language that a middle school student could understand."
)
