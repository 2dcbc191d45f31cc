"""Entity models and their local/wire mappings.

Local JSON uses the camelCase shape the mobile app has always persisted.
Wire payloads are the same shape with ``id`` carried as ``clientId``;
``from_wire`` expects a record already reconciled onto the client id.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

__all__ = [
    "RoutineExercise",
    "Routine",
    "WorkoutSet",
    "WorkoutExercise",
    "Workout",
    "BodyWeightEntry",
    "Food",
    "FoodLogEntry",
    "RoutePoint",
    "RunEntry",
    "MacroTargets",
    "UserProfile",
    "Exercise",
    "ProgressionSuggestion",
]


def _compact(data: dict) -> dict:
    """Drop unset optional fields."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class RoutineExercise:
    exercise_id: str
    exercise_name: str
    order: int = 0

    def to_dict(self) -> dict:
        return {
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RoutineExercise":
        return cls(
            exercise_id=str(data["exerciseId"]),
            exercise_name=data.get("exerciseName", ""),
            order=data.get("order", 0),
        )


@dataclass
class Routine:
    """A named, ordered list of exercises."""

    name: str
    exercises: list[RoutineExercise] = field(default_factory=list)
    created_at: str = ""
    id: str = ""
    last_completed_at: Optional[str] = None
    is_favorite: Optional[bool] = None
    category: Optional[str] = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "exercises": [e.to_dict() for e in self.exercises],
                "createdAt": self.created_at,
                "lastCompletedAt": self.last_completed_at,
                "isFavorite": self.is_favorite,
                "category": self.category,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Routine":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            exercises=[RoutineExercise.from_dict(e) for e in data.get("exercises") or []],
            created_at=data.get("createdAt") or "",
            last_completed_at=data.get("lastCompletedAt"),
            is_favorite=data.get("isFavorite"),
            category=data.get("category"),
        )

    def to_wire(self) -> dict:
        wire = self.to_dict()
        wire["clientId"] = wire.pop("id")
        return wire

    @classmethod
    def from_wire(cls, record: dict) -> "Routine":
        return cls.from_dict(record)


@dataclass
class WorkoutSet:
    weight: float
    reps: int
    completed: bool = False
    id: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "weight": self.weight,
            "reps": self.reps,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSet":
        return cls(
            id=str(data.get("id", "")),
            weight=data.get("weight", 0),
            reps=data.get("reps", 0),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class WorkoutExercise:
    exercise_id: str
    exercise_name: str
    sets: list[WorkoutSet] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "sets": [s.to_dict() for s in self.sets],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutExercise":
        return cls(
            exercise_id=str(data["exerciseId"]),
            exercise_name=data.get("exerciseName", ""),
            sets=[WorkoutSet.from_dict(s) for s in data.get("sets") or []],
        )


@dataclass
class Workout:
    """One logged training session."""

    routine_id: str
    routine_name: str
    started_at: str
    exercises: list[WorkoutExercise] = field(default_factory=list)
    id: str = ""
    completed_at: Optional[str] = None
    duration_minutes: Optional[float] = None
    notes: Optional[str] = None
    total_volume_kg: Optional[float] = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "routineId": self.routine_id,
                "routineName": self.routine_name,
                "exercises": [e.to_dict() for e in self.exercises],
                "startedAt": self.started_at,
                "completedAt": self.completed_at,
                "durationMinutes": self.duration_minutes,
                "notes": self.notes,
                "totalVolumeKg": self.total_volume_kg,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        return cls(
            id=str(data["id"]),
            routine_id=str(data.get("routineId") or ""),
            routine_name=data.get("routineName") or "",
            exercises=[WorkoutExercise.from_dict(e) for e in data.get("exercises") or []],
            started_at=data.get("startedAt") or "",
            completed_at=data.get("completedAt"),
            duration_minutes=data.get("durationMinutes"),
            notes=data.get("notes"),
            total_volume_kg=data.get("totalVolumeKg"),
        )

    def to_wire(self) -> dict:
        wire = self.to_dict()
        wire["clientId"] = wire.pop("id")
        return wire

    @classmethod
    def from_wire(cls, record: dict) -> "Workout":
        return cls.from_dict(record)


@dataclass
class BodyWeightEntry:
    weight_kg: float
    date: str  # YYYY-MM-DD
    id: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "weightKg": self.weight_kg, "date": self.date}

    @classmethod
    def from_dict(cls, data: dict) -> "BodyWeightEntry":
        return cls(
            id=str(data["id"]),
            weight_kg=data["weightKg"],
            date=data["date"],
        )

    def to_wire(self) -> dict:
        return {"clientId": self.id, "weightKg": self.weight_kg, "date": self.date}

    @classmethod
    def from_wire(cls, record: dict) -> "BodyWeightEntry":
        # The server stores a timestamp; the app only cares about the day.
        return cls(
            id=str(record["id"]),
            weight_kg=record["weightKg"],
            date=str(record["date"]).split("T")[0],
        )


@dataclass
class Food:
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    id: str = ""
    is_saved: bool = False
    serving: Optional[str] = None
    image_uri: Optional[str] = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "calories": self.calories,
                "protein": self.protein,
                "carbs": self.carbs,
                "fat": self.fat,
                "isSaved": self.is_saved,
                "serving": self.serving,
                "imageUri": self.image_uri,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Food":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            calories=data.get("calories", 0),
            protein=data.get("protein", 0),
            carbs=data.get("carbs", 0),
            fat=data.get("fat", 0),
            is_saved=bool(data.get("isSaved", False)),
            serving=data.get("serving"),
            image_uri=data.get("imageUri"),
        )


@dataclass
class FoodLogEntry:
    food: Food
    date: str  # YYYY-MM-DD
    created_at: str = ""
    id: str = ""
    food_id: str = ""
    image_uri: Optional[str] = None
    meal_type: Optional[str] = None  # breakfast | lunch | dinner | snack

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "foodId": self.food_id or self.food.id,
                "food": self.food.to_dict(),
                "date": self.date,
                "createdAt": self.created_at,
                "imageUri": self.image_uri,
                "mealType": self.meal_type,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "FoodLogEntry":
        food = Food.from_dict(data.get("food") or {})
        return cls(
            id=str(data["id"]),
            food_id=str(data.get("foodId") or food.id),
            food=food,
            date=data["date"],
            created_at=data.get("createdAt") or "",
            image_uri=data.get("imageUri"),
            meal_type=data.get("mealType"),
        )

    def to_wire(self) -> dict:
        return _compact(
            {
                "clientId": self.id,
                "foodData": self.food.to_dict(),
                "date": self.date,
                "createdAt": self.created_at,
                "imageUri": self.image_uri,
                "mealType": self.meal_type,
            }
        )

    @classmethod
    def from_wire(cls, record: dict) -> "FoodLogEntry":
        food = Food.from_dict(record.get("foodData") or {})
        return cls(
            id=str(record["id"]),
            food_id=food.id,
            food=food,
            date=str(record["date"]).split("T")[0],
            created_at=record.get("createdAt") or "",
            image_uri=record.get("imageUri"),
            meal_type=record.get("mealType"),
        )


@dataclass
class RoutePoint:
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict) -> "RoutePoint":
        return cls(latitude=data["latitude"], longitude=data["longitude"])


@dataclass
class RunEntry:
    distance_km: float
    duration_seconds: float
    pace_min_per_km: float
    started_at: str
    completed_at: str
    id: str = ""
    calories: Optional[float] = None
    route: Optional[list[RoutePoint]] = None
    avg_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    heart_rate_zone: Optional[str] = None
    elevation_gain_m: Optional[float] = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "distanceKm": self.distance_km,
                "durationSeconds": self.duration_seconds,
                "paceMinPerKm": self.pace_min_per_km,
                "calories": self.calories,
                "startedAt": self.started_at,
                "completedAt": self.completed_at,
                "route": [p.to_dict() for p in self.route] if self.route is not None else None,
                "avgHeartRate": self.avg_heart_rate,
                "maxHeartRate": self.max_heart_rate,
                "heartRateZone": self.heart_rate_zone,
                "elevationGainM": self.elevation_gain_m,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "RunEntry":
        route = data.get("route")
        return cls(
            id=str(data["id"]),
            distance_km=data["distanceKm"],
            duration_seconds=data["durationSeconds"],
            pace_min_per_km=data.get("paceMinPerKm") or 0,
            calories=data.get("calories"),
            started_at=data["startedAt"],
            completed_at=data["completedAt"],
            route=[RoutePoint.from_dict(p) for p in route] if route is not None else None,
            avg_heart_rate=data.get("avgHeartRate"),
            max_heart_rate=data.get("maxHeartRate"),
            heart_rate_zone=data.get("heartRateZone"),
            elevation_gain_m=data.get("elevationGainM"),
        )

    def to_wire(self) -> dict:
        wire = self.to_dict()
        wire["clientId"] = wire.pop("id")
        return wire

    @classmethod
    def from_wire(cls, record: dict) -> "RunEntry":
        return cls.from_dict(record)


@dataclass
class MacroTargets:
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0

    def to_dict(self) -> dict:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MacroTargets":
        return cls(
            calories=data["calories"],
            protein=data["protein"],
            carbs=data["carbs"],
            fat=data["fat"],
        )

    def __add__(self, other: "MacroTargets") -> "MacroTargets":
        return MacroTargets(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


@dataclass
class UserProfile:
    """Onboarding answers; kept on the device only."""

    name: str
    age: int
    sex: str  # male | female
    height_cm: float
    weight_kg: float
    goal: str = "maintain"  # lose_fat | gain_muscle | recomposition | maintain
    activity_level: str = "3-4"  # 1-2 | 3-4 | 5-6
    experience: str = "beginner"
    unit_system: str = "metric"
    email: str = ""
    id: str = ""
    weight_goal_kg: Optional[float] = None
    onboarding_completed: bool = False
    created_at: str = ""

    def to_dict(self) -> dict:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "email": self.email,
                "age": self.age,
                "sex": self.sex,
                "heightCm": self.height_cm,
                "weightKg": self.weight_kg,
                "weightGoalKg": self.weight_goal_kg,
                "experience": self.experience,
                "goal": self.goal,
                "activityLevel": self.activity_level,
                "unitSystem": self.unit_system,
                "onboardingCompleted": self.onboarding_completed,
                "createdAt": self.created_at,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            email=data.get("email", ""),
            age=data["age"],
            sex=data["sex"],
            height_cm=data["heightCm"],
            weight_kg=data["weightKg"],
            weight_goal_kg=data.get("weightGoalKg"),
            experience=data.get("experience", "beginner"),
            goal=data.get("goal", "maintain"),
            activity_level=data.get("activityLevel", "3-4"),
            unit_system=data.get("unitSystem", "metric"),
            onboarding_completed=bool(data.get("onboardingCompleted", False)),
            created_at=data.get("createdAt", ""),
        )


@dataclass
class Exercise:
    name: str
    muscle_group: str
    id: str = ""
    is_custom: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "muscleGroup": self.muscle_group,
            "isCustom": self.is_custom,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            muscle_group=data.get("muscleGroup", ""),
            is_custom=bool(data.get("isCustom", False)),
        )


@dataclass
class ProgressionSuggestion:
    exercise_id: str
    exercise_name: str
    suggested_weight: float
    message: str
