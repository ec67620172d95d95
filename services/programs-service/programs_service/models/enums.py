from enum import Enum


class ExerciseCategory(str, Enum):
    strength = "strength"
    cardio = "cardio"
    yoga = "yoga"
    pilates = "pilates"
    hiit = "hiit"
    stretching = "stretching"
    running = "running"
    cycling = "cycling"
    swimming = "swimming"
    calisthenics = "calisthenics"


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class MuscleGroup(str, Enum):
    chest = "chest"
    back = "back"
    shoulders = "shoulders"
    biceps = "biceps"
    triceps = "triceps"
    quadriceps = "quadriceps"
    hamstrings = "hamstrings"
    glutes = "glutes"
    calves = "calves"
    core = "core"
    full_body = "full_body"


class Equipment(str, Enum):
    barbell = "barbell"
    dumbbell = "dumbbell"
    kettlebell = "kettlebell"
    machine = "machine"
    cable = "cable"
    bodyweight = "bodyweight"
    bands = "bands"
    other = "other"


class ExerciseLocation(str, Enum):
    home = "home"
    gym = "gym"
    outdoor = "outdoor"
    anywhere = "anywhere"


class ProgramGoal(str, Enum):
    general = "general"
    muscle_building = "muscle_building"
    fat_loss = "fat_loss"
    strength = "strength"
    endurance = "endurance"
    flexibility = "flexibility"
    athletic_performance = "athletic_performance"
    rehabilitation = "rehabilitation"
    competition = "competition"
    maintenance = "maintenance"


class WorkoutGoal(str, Enum):
    strength = "strength"
    cardio = "cardio"
    flexibility = "flexibility"
    fat_loss = "fat_loss"
    general = "general"


class ProgramStatus(str, Enum):
    queued = "queued"
    active = "active"
    completed = "completed"


class CreationType(str, Enum):
    preset = "preset"
    custom = "custom"


class WorkoutType(str, Enum):
    standalone = "standalone"
    program_session = "program_session"


class WorkoutStatus(str, Enum):
    scheduled = "scheduled"
    active = "active"
    completed = "completed"
    deleted = "deleted"


class SessionStatus(str, Enum):
    in_progress = "in_progress"
    paused = "paused"
    cancelled = "cancelled"
    completed = "completed"


class Mood(str, Enum):
    amazing = "amazing"
    good = "good"
    okay = "okay"
    tired = "tired"
    stressed = "stressed"


MOOD_SCORES = {
    Mood.amazing.value: 100,
    Mood.good.value: 75,
    Mood.okay.value: 50,
    Mood.tired.value: 35,
    Mood.stressed.value: 25,
}
