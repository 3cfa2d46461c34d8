"""LLM prompt templates for GoTrain."""

# ============================================================================
# REVISION PROTOCOL
# ============================================================================

# Wire contract with the model: a revised plan is sent as
# <REVISED_PLAN>{json}</REVISED_PLAN> inside an otherwise free-text reply.
REVISED_PLAN_START_TAG = "<REVISED_PLAN>"
REVISED_PLAN_END_TAG = "</REVISED_PLAN>"

PLAN_UPDATED_MESSAGE = "I've updated your plan based on your request! ✨"

# ============================================================================
# PLAN SCHEMA
# ============================================================================

WEEKLY_PLAN_SCHEMA = """{{
  "weeklySummary": "Short overview of the week's focus and total volume",
  "days": [
    {{
      "dayNumber": 1,
      "date": "YYYY-MM-DD",
      "title": "Day Title (e.g. Endurance Run, Strength Training)",
      "type": "rest | run | strength | cross-train",
      "activities": [
        {{
          "name": "Activity Name",
          "duration": "Duration in mins or {distance_label}",
          "intensity": "Easy | Moderate | Hard | Max",
          "details": "Specifics like pace, route or focus",
          "exercises": [
            {{
              "name": "Exercise Name",
              "sets": "3",
              "reps": "8-10",
              "weight": "Load in {weight_unit}",
              "notes": "Tempo, rest or form cues"
            }}
          ]
        }}
      ],
      "coachTips": ["Tip 1", "Tip 2"]
    }}
  ]
}}"""

# ============================================================================
# PLAN GENERATION PROMPTS
# ============================================================================

PLAN_GENERATION_SYSTEM = (
    "You are a professional fitness coach assistant. You provide personalized, "
    "safe, and effective workout suggestions. You always respond in valid JSON "
    "format according to the requested schema."
)

PLAN_GENERATION_USER = """User Goals:
{goals_block}

Recent Workouts (Last 7 days):
{activities_block}
{strength_block}
As a professional fitness coach, generate a highly structured weekly workout plan in JSON format.

The JSON should follow this structure:
{schema}

Ensure the plan strictly follows the user's availability of {days_per_week} days/week: exactly {days_per_week} training days. For other days, mark them as "rest".
IMPORTANT: Use {distance_unit} for all distances and {weight_unit} for all weights (if any) in the plan.
Assign dates starting from today, {current_date} (day 1), with one consecutive calendar day per dayNumber.
Put every structured exercise (sets, reps, weight) in the "exercises" field of its activity, not in "details".
"""

STRENGTH_BLOCK = """
Strength History (estimated one-rep max per exercise):
{stats}
Base every strength-day weight prescription on these one-rep max estimates.
"""

NO_ACTIVITIES = "No recent activities found."

# ============================================================================
# COACH CHAT PROMPTS
# ============================================================================

COACH_CHAT_SYSTEM = """You are GoTrain AI Coach.
User Goals: {goals_summary}
{considerations_line}Units: {distance_unit} for distance, {weight_unit} for weights.

Current Workout Plan:
{current_plan}

Recent Activities:
{recent_activities}

INSTRUCTIONS:
1. Answer fitness questions accurately and encouragingly.
2. If the user asks to EDIT or CHANGE the plan (e.g., "add yoga", "swap day 2", "make it harder"):
   - You MUST provide a COMPLETELY REVISED JSON plan with all days, not only the changed ones.
   - Wrap the JSON in a special tag: {start_tag}...{end_tag}.
   - Put raw JSON between the tags. Do not use code fences.
   - Ensure the JSON follows the exact schema from before.
3. Keep responses concise and professional.
"""

NO_PLAN = "No plan yet."
NO_GOALS = "No goals set yet."
