"""
Coach Context Assembly for FitCoach

Builds the system prompt for a chat turn: a fixed, locale-specific coach
persona followed by a recap of the user's current data. Static instructions
always come before per-user facts, and the recap sections always appear in
the same order:

    CLIENT PROFILE -> COACHING STYLE -> LATEST PROGRESS -> RECENT WORKOUTS -> REMINDERS

Every slot is rendered even when the underlying data is missing, so the
model can tell "unknown" apart from "not mentioned".
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


Language = Literal["en", "ar"]

RECENT_WORKOUT_LIMIT = 5


# ============================================================================
# Snapshots
# ============================================================================

class _Snapshot(BaseModel):
    """Read-only view of an ORM row; enum columns are flattened to their values."""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("*", mode="before")
    @classmethod
    def enum_to_value(cls, v: Any) -> Any:
        return v.value if isinstance(v, Enum) else v


class ProfileSnapshot(_Snapshot):
    age: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    goal: Optional[str] = None
    experience_level: Optional[str] = None
    activity_level: Optional[str] = None
    days_per_week: Optional[int] = None
    session_length: Optional[int] = None
    equipment: Optional[str] = None
    injuries: Optional[str] = None
    allergies: Optional[str] = None


class CoachPersonaSnapshot(_Snapshot):
    name: Optional[str] = None
    style: Optional[str] = None
    tone: Optional[str] = None
    language: Optional[str] = None


class ProgressSnapshot(_Snapshot):
    date: Optional[datetime] = None
    weight: Optional[float] = None
    body_fat: Optional[float] = None
    notes: Optional[str] = None


class WorkoutSnapshot(_Snapshot):
    name: str
    date: Optional[datetime] = None
    duration: Optional[int] = None


@dataclass
class CoachContextInputs:
    """Latest snapshot of everything the coach should know about the user."""
    profile: Optional[ProfileSnapshot] = None
    coach_persona: Optional[CoachPersonaSnapshot] = None
    latest_progress: Optional[ProgressSnapshot] = None
    recent_workouts: List[WorkoutSnapshot] = field(default_factory=list)


# ============================================================================
# Locale templates
# ============================================================================

PERSONA_EN = """You are an experienced personal fitness coach and bodybuilding expert, and you genuinely care about your client's results.

HOW YOU TALK:
- Speak naturally, the way a real coach texts a client they know well. Never sound like a chatbot.
- Never say things like "As an AI" or "I am programmed to".
- Keep answers personal: refer to the client's goal, schedule, equipment, injuries and recent training.
- Be warm and encouraging, but honest. Call out inconsistency with care and celebrate every win.
- Vary your length: short and punchy for quick questions, detailed when explaining a plan.
- Use bullet points only when listing several items.
- End with a question or a clear next step to keep the conversation going.

WHAT YOU DO:
- Check in on progress and suggest adjustments to training and nutrition.
- Remember what the client told you earlier in the conversation and build on it.
- Respect injuries and dietary restrictions in every recommendation."""

PERSONA_AR = """أنت مدرب لياقة بدنية وكمال أجسام محترف من السعودية، وتهتم فعلاً بنتائج متدربك.

طريقة كلامك:
- تكلم بشكل طبيعي زي المدرب اللي يعرف متدربه زين، ولا تتكلم زي الروبوت أبداً.
- لا تقول عبارات زي "كمساعد ذكي" أو "أنا مبرمج على".
- خل ردودك شخصية: ارجع لهدف المتدرب وجدوله ومعداته وإصاباته وتمارينه الأخيرة.
- كن مشجع ودافئ لكن صادق، ونبهه بلطف إذا ما كان منتظم، واحتفل بكل إنجاز.
- نوّع طول الرد: قصير للأسئلة السريعة ومفصل لما تشرح خطة.
- استخدم النقاط بس لما تعدد أكثر من شي.
- اختم بسؤال أو خطوة واضحة عشان تستمر المحادثة.

وش تسوي:
- تابع تقدمه واقترح تعديلات على التمرين والتغذية.
- تذكر اللي قاله في المحادثة وابنِ عليه.
- احترم الإصابات والقيود الغذائية في كل توصية.

استخدم اللهجة السعودية الطبيعية في الكلام اليومي، والفصحى أكثر في المواضيع الطبية أو الرسمية."""

LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "not_set": "Not set",
        "profile_header": "=== CLIENT PROFILE ===",
        "no_profile": "The client has not completed their profile yet.",
        "age": "Age",
        "gender": "Gender",
        "height": "Height",
        "weight": "Current Weight",
        "goal": "Primary Goal",
        "experience_level": "Experience Level",
        "activity_level": "Activity Level",
        "days_per_week": "Training Days",
        "session_length": "Session Length",
        "equipment": "Equipment",
        "injuries": "Injuries/Limitations",
        "allergies": "Dietary Restrictions",
        "cm": "cm",
        "kg": "kg",
        "days_unit": "days/week",
        "minutes": "minutes",
        "min": "min",
        "coach_header": "=== COACHING STYLE ===",
        "coach_name": "Your Name",
        "coach_style": "Style",
        "coach_tone": "Tone",
        "coach_hint": "Adapt your responses to match this style and tone. Stay natural and consistent.",
        "progress_header": "=== LATEST PROGRESS ===",
        "no_progress": "No progress data logged yet.",
        "date": "Date",
        "body_fat": "Body Fat",
        "notes": "Notes",
        "workouts_header": "=== RECENT WORKOUTS ===",
        "workouts_header_count": "=== RECENT WORKOUTS (Last {count}) ===",
        "workouts_hint": "Use this information to track progress and adjust recommendations.",
        "no_workouts": "No recent workouts logged.",
        "no_workouts_hint": "This is an opportunity to motivate them to get started!",
        "reminders_header": "=== IMPORTANT REMINDERS ===",
        "reminders": (
            "- Talk to them like a friend you genuinely care about\n"
            "- Be proactive: ask about progress, suggest improvements, celebrate wins\n"
            "- Reference earlier messages and the goals they mentioned\n"
            "- Be warm, motivational and honest"
        ),
    },
    "ar": {
        "not_set": "غير محدد",
        "profile_header": "=== ملف المتدرب الشخصي ===",
        "no_profile": "المتدرب ما أكمل ملفه الشخصي للحين.",
        "age": "العمر",
        "gender": "الجنس",
        "height": "الطول",
        "weight": "الوزن الحالي",
        "goal": "الهدف الأساسي",
        "experience_level": "مستوى الخبرة",
        "activity_level": "مستوى النشاط",
        "days_per_week": "أيام التدريب",
        "session_length": "مدة الجلسة",
        "equipment": "المعدات المتاحة",
        "injuries": "الإصابات/القيود",
        "allergies": "القيود الغذائية",
        "cm": "سم",
        "kg": "كجم",
        "days_unit": "يوم/أسبوع",
        "minutes": "دقيقة",
        "min": "دقيقة",
        "coach_header": "=== أسلوب التدريب المفضل ===",
        "coach_name": "اسمك",
        "coach_style": "الأسلوب",
        "coach_tone": "النبرة",
        "coach_hint": "تكيف مع هذا الأسلوب والنبرة في كل ردودك، وخلك طبيعي ومتسق.",
        "progress_header": "=== آخر تقدم ===",
        "no_progress": "ما فيه بيانات تقدم مسجلة للحين.",
        "date": "التاريخ",
        "body_fat": "نسبة الدهون",
        "notes": "ملاحظات",
        "workouts_header": "=== التمارين الأخيرة ===",
        "workouts_header_count": "=== التمارين الأخيرة (آخر {count}) ===",
        "workouts_hint": "استخدم هذي المعلومات لتتبع التقدم وتعديل التوصيات.",
        "no_workouts": "لا توجد تمارين مسجلة مؤخراً.",
        "no_workouts_hint": "هذي فرصة تحفزه يبدأ!",
        "reminders_header": "=== تذكير مهم ===",
        "reminders": (
            "- تكلم معه زي صاحبك اللي تهتم فيه\n"
            "- كن مبادر: اسأل عن التقدم، اقترح تحسينات، احتفل بالإنجازات\n"
            "- ارجع للرسائل السابقة والأهداف اللي ذكرها\n"
            "- كن دافئ ومحفز وصادق"
        ),
    },
}

PERSONAS: Dict[str, str] = {"en": PERSONA_EN, "ar": PERSONA_AR}


# ============================================================================
# Assembly
# ============================================================================

def normalize_language(language: Optional[str], default: Language = "en") -> Language:
    """
    Map a request or persona language to a supported locale key.

    Accepts locale tags ("ar", "ar-SA") and persona names ("Arabic").
    """
    if not language:
        return default
    value = language.strip().lower()
    if value.startswith("ar") or value in ("arabic", "العربية"):
        return "ar"
    if value.startswith("en") or value == "english":
        return "en"
    return default


def get_persona_prompt(language: Language = "en") -> str:
    """Fixed coach persona instructions for a locale."""
    return PERSONAS.get(language, PERSONA_EN)


def _value(value: Any, labels: Dict[str, str], suffix: Optional[str] = None) -> str:
    if value is None or value == "":
        return labels["not_set"]
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value} {suffix}" if suffix else str(value)


def _format_date(value: Optional[datetime], labels: Dict[str, str]) -> str:
    if value is None:
        return labels["not_set"]
    return value.strftime("%Y-%m-%d")


def _profile_section(profile: Optional[ProfileSnapshot], labels: Dict[str, str]) -> List[str]:
    lines = [labels["profile_header"]]
    if profile is None:
        lines.append(labels["no_profile"])
        profile = ProfileSnapshot()

    lines.extend([
        f"{labels['age']}: {_value(profile.age, labels)}",
        f"{labels['gender']}: {_value(profile.gender, labels)}",
        f"{labels['height']}: {_value(profile.height, labels, labels['cm'])}",
        f"{labels['weight']}: {_value(profile.weight, labels, labels['kg'])}",
        f"{labels['goal']}: {_value(profile.goal, labels)}",
        f"{labels['experience_level']}: {_value(profile.experience_level, labels)}",
        f"{labels['activity_level']}: {_value(profile.activity_level, labels)}",
        f"{labels['days_per_week']}: {_value(profile.days_per_week, labels, labels['days_unit'])}",
        f"{labels['session_length']}: {_value(profile.session_length, labels, labels['minutes'])}",
        f"{labels['equipment']}: {_value(profile.equipment, labels)}",
        f"{labels['injuries']}: {_value(profile.injuries, labels)}",
        f"{labels['allergies']}: {_value(profile.allergies, labels)}",
    ])
    return lines


def _coach_section(persona: Optional[CoachPersonaSnapshot], labels: Dict[str, str]) -> List[str]:
    persona = persona or CoachPersonaSnapshot()
    return [
        labels["coach_header"],
        f"{labels['coach_name']}: {_value(persona.name, labels)}",
        f"{labels['coach_style']}: {_value(persona.style, labels)}",
        f"{labels['coach_tone']}: {_value(persona.tone, labels)}",
        "",
        labels["coach_hint"],
    ]


def _progress_section(progress: Optional[ProgressSnapshot], labels: Dict[str, str]) -> List[str]:
    lines = [labels["progress_header"]]
    if progress is None:
        lines.append(labels["no_progress"])
        return lines

    body_fat = f"{_value(progress.body_fat, labels)}%" if progress.body_fat is not None else labels["not_set"]
    lines.extend([
        f"{labels['date']}: {_format_date(progress.date, labels)}",
        f"{labels['weight']}: {_value(progress.weight, labels, labels['kg'])}",
        f"{labels['body_fat']}: {body_fat}",
        f"{labels['notes']}: {_value(progress.notes, labels)}",
    ])
    return lines


def _workouts_section(workouts: List[WorkoutSnapshot], labels: Dict[str, str]) -> List[str]:
    recent = workouts[:RECENT_WORKOUT_LIMIT]
    if not recent:
        return [labels["workouts_header"], labels["no_workouts"], labels["no_workouts_hint"]]

    lines = [labels["workouts_header_count"].format(count=len(recent))]
    for index, workout in enumerate(recent, start=1):
        lines.append(
            f"{index}. {workout.name} - {_format_date(workout.date, labels)} "
            f"({_value(workout.duration, labels, labels['min'])})"
        )
    lines.extend(["", labels["workouts_hint"]])
    return lines


def build_user_context(inputs: CoachContextInputs, language: Language = "en") -> str:
    """
    Render the per-user recap that follows the persona instructions.

    Pure function of its inputs; never raises on missing data.
    """
    labels = LABELS.get(language, LABELS["en"])
    sections = [
        _profile_section(inputs.profile, labels),
        _coach_section(inputs.coach_persona, labels),
        _progress_section(inputs.latest_progress, labels),
        _workouts_section(inputs.recent_workouts, labels),
        [labels["reminders_header"], labels["reminders"]],
    ]
    return "\n\n".join("\n".join(section) for section in sections)


def build_system_prompt(inputs: CoachContextInputs, language: Language = "en") -> str:
    """Persona instructions followed by the user recap, as one text block."""
    return f"{get_persona_prompt(language)}\n\n{build_user_context(inputs, language)}\n"
