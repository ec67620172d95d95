from prometheus_client import Counter

PROGRAM_ENROLLMENTS_TOTAL = Counter(
    "program_enrollments_total",
    "Number of program enrollments materialized in programs-service",
    ["mode"],  # new | replace | queued
)

PROGRAM_ENROLLMENT_FAILURES_TOTAL = Counter(
    "program_enrollment_failures_total",
    "Number of enrollments rolled back because persistence failed",
)

PROGRAM_WORKOUTS_GENERATED_TOTAL = Counter(
    "program_workouts_generated_total",
    "Number of workout instances generated from program templates",
)

CATALOG_EXERCISES_SYNTHESIZED_TOTAL = Counter(
    "catalog_exercises_synthesized_total",
    "Number of exercises created on a catalog miss during workout generation",
)

PROGRAM_CHANGE_EVENTS_TOTAL = Counter(
    "program_change_events_total",
    "Number of active-program change events published",
    ["reason"],
)

WORKOUT_SESSIONS_STARTED_TOTAL = Counter(
    "workout_sessions_started_total",
    "Number of workout sessions started in programs-service",
)

WORKOUT_SESSIONS_COMPLETED_TOTAL = Counter(
    "workout_sessions_completed_total",
    "Number of workout sessions completed in programs-service",
)

WATCH_MESSAGES_RELAYED_TOTAL = Counter(
    "watch_messages_relayed_total",
    "Number of messages relayed to the companion watch",
    ["type"],
)

PERSONAL_RECORDS_TOTAL = Counter(
    "personal_records_total",
    "Number of personal records set in completed sessions",
)

DAILY_CHECKINS_TOTAL = Counter(
    "daily_checkins_total",
    "Number of daily check-ins recorded",
    ["mode"],  # created | updated
)
