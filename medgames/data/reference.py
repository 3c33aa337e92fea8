"""Static patient-education reference text keyed by drug name and formulation."""

from ..models.types import ER, MedicationMention, ResolvedMedicationDetails, SearchCandidateRecord

INDICATIONS = {
    "metformin": "Type 2 diabetes mellitus management to improve glycemic control",
    "lisinopril": "Hypertension and heart failure management",
    "atorvastatin": "Dyslipidemia and cardiovascular disease prevention",
    "amlodipine": "Hypertension and angina management",
    "insulin": "Diabetes mellitus for glycemic control",
    "albuterol": "Bronchospasm relief in patients with reversible obstructive airway disease including asthma and COPD",
    "tiotropium": "Long-term maintenance treatment of bronchospasm associated with COPD",
    "ipratropium": "Bronchospasm associated with COPD including chronic bronchitis and emphysema",
    "budesonide": "Maintenance treatment of asthma and COPD inflammation",
    "fluticasone": "Maintenance treatment of asthma and COPD as prophylactic therapy",
}

DOSAGES = {
    "metformin": {
        "IR": "Initial: 500mg twice daily with meals. Maximum: 2000mg daily (IR formulation)",
        "ER": "Initial: 500mg once daily with evening meal. Maximum: 2000mg daily (ER formulation)",
    },
    "lisinopril": {
        "IR": "Initial: 10mg once daily. Range: 5-40mg daily (IR formulation)",
        "ER": "Initial: 10mg once daily. Range: 5-40mg daily (ER formulation)",
    },
    "atorvastatin": {
        "IR": "Initial: 10-20mg once daily. Range: 10-80mg daily (IR formulation)",
        "ER": "Initial: 10-20mg once daily. Range: 10-80mg daily (ER formulation)",
    },
    "amlodipine": {
        "IR": "Initial: 5mg once daily. Maximum: 10mg daily (IR formulation)",
        "ER": "Initial: 5mg once daily. Maximum: 10mg daily (ER formulation)",
    },
    "insulin": {
        "IR": "Individualized based on blood glucose monitoring (rapid-acting)",
        "ER": "Individualized based on blood glucose monitoring (long-acting)",
    },
    "albuterol": {
        "IR": "Inhaler: 1-2 puffs every 4-6 hours as needed. Maximum: 12 puffs daily (rescue inhaler)",
        "ER": "Extended-release tablets: 4-8mg every 12 hours (ER formulation)",
    },
    "tiotropium": {
        "IR": "18mcg once daily via HandiHaler or 2.5mcg once daily via Respimat (maintenance therapy)",
        "ER": "18mcg once daily via HandiHaler or 2.5mcg once daily via Respimat (maintenance therapy)",
    },
    "ipratropium": {
        "IR": "Inhaler: 2 puffs 4 times daily. Maximum: 12 puffs daily (maintenance bronchodilator)",
        "ER": "Inhaler: 2 puffs 4 times daily. Maximum: 12 puffs daily (maintenance bronchodilator)",
    },
    "budesonide": {
        "IR": "Inhaler: 1-2 puffs twice daily (maintenance anti-inflammatory)",
        "ER": "Inhaler: 1-2 puffs twice daily (maintenance anti-inflammatory)",
    },
    "fluticasone": {
        "IR": "Inhaler: 1-2 puffs twice daily (maintenance anti-inflammatory)",
        "ER": "Inhaler: 1-2 puffs twice daily (maintenance anti-inflammatory)",
    },
}

CONTRAINDICATIONS = {
    "metformin": "Severe renal impairment, metabolic acidosis, diabetic ketoacidosis",
    "lisinopril": "History of angioedema, pregnancy, bilateral renal artery stenosis",
    "atorvastatin": "Active liver disease, pregnancy, breastfeeding",
    "amlodipine": "Known hypersensitivity to amlodipine or other dihydropyridines",
    "insulin": "Hypoglycemia, known hypersensitivity to insulin",
}

WARNINGS = {
    "metformin": "Risk of lactic acidosis, especially in renal impairment. Monitor kidney function",
    "lisinopril": "Monitor for hyperkalemia, renal function changes, and angioedema",
    "atorvastatin": "Monitor liver enzymes and for signs of myopathy or rhabdomyolysis",
    "amlodipine": "May cause peripheral edema and hypotension",
    "insulin": "Risk of hypoglycemia. Monitor blood glucose levels closely",
}

SIDE_EFFECTS = {
    "metformin": "Nausea, vomiting, diarrhea, abdominal pain, loss of appetite",
    "lisinopril": "Dry cough, hyperkalemia, angioedema, hypotension, dizziness",
    "atorvastatin": "Muscle pain, elevated liver enzymes, headache, nausea",
    "amlodipine": "Peripheral edema, dizziness, flushing, palpitations",
    "insulin": "Hypoglycemia, injection site reactions, weight gain",
    "albuterol": "Tremor, nervousness, headache, throat irritation, palpitations",
    "tiotropium": "Dry mouth, constipation, upper respiratory tract infection, urinary retention",
    "ipratropium": "Dry mouth, cough, headache, dizziness, nausea",
    "budesonide": "Oral thrush, hoarse voice, cough, headache, upper respiratory infection",
    "fluticasone": "Oral thrush, hoarse voice, headache, cough, upper respiratory infection",
}


def indications(drug: str, formulation: str) -> str:
    base = INDICATIONS.get(drug.lower(), "Consult prescribing information for specific indications")
    return f"{base} ({formulation} formulation)"


def dosage(drug: str, formulation: str) -> str:
    per_formulation = DOSAGES.get(drug.lower())
    if per_formulation:
        return per_formulation[formulation]
    return f"Dosage should be individualized by healthcare provider ({formulation} formulation)"


def contraindications(drug: str, formulation: str) -> str:
    base = CONTRAINDICATIONS.get(drug.lower(), "See prescribing information for contraindications")
    return f"{base} (applies to both IR and ER formulations)"


def warnings(drug: str, formulation: str) -> str:
    base = WARNINGS.get(drug.lower(), "Monitor patient response and adjust as needed")
    if formulation == ER:
        note = "Extended-release formulation provides prolonged effect - do not crush or chew tablets."
    else:
        note = "Immediate-release formulation provides rapid onset of action."
    return f"{base} {note}"


def side_effects(drug: str, formulation: str) -> str:
    base = SIDE_EFFECTS.get(drug.lower(), "Common side effects vary by medication")
    if formulation == ER:
        note = "ER formulation may have reduced GI side effects due to slower release."
    else:
        note = "IR formulation may cause more immediate onset of side effects."
    return f"{base} {note}"


def build_details(candidate: SearchCandidateRecord, mention: MedicationMention) -> ResolvedMedicationDetails:
    """
    Enrich an accepted candidate with reference text for the mention.

    Args:
        candidate: The accepted search result
        mention: The mention it resolves

    Returns:
        ResolvedMedicationDetails
    """
    drug, formulation = mention.name, mention.formulation
    return ResolvedMedicationDetails(
        set_id=candidate.set_id,
        title=candidate.title,
        generic_name=candidate.generic_name,
        brand_name=candidate.brand_name,
        labeler=candidate.labeler,
        active_ingredients=[candidate.generic_name] if candidate.generic_name else [],
        indications=indications(drug, formulation),
        dosage_and_administration=dosage(drug, formulation),
        contraindications=contraindications(drug, formulation),
        warnings_and_precautions=warnings(drug, formulation),
        adverse_reactions=side_effects(drug, formulation),
    )
