from django.urls import path

from .views import (
    AvailableLiveQuizListView,
    FirstLiveQuizView,
    LiveQuizArchiveView,
    LiveQuizDetailView,
    LiveQuizListCreateView,
    QuestionPreviewView,
    QuizLeaderboardView,
    QuizResultView,
    SeriesOverviewView,
    SeriesQuizListView,
    StartQuizView,
)

urlpatterns = [
    # Student endpoints
    path('series/', SeriesOverviewView.as_view()),
    path('series/<str:series>/', SeriesQuizListView.as_view()),
    path('<int:quiz_id>/start/', StartQuizView.as_view()),
    path('<int:quiz_id>/results/', QuizResultView.as_view()),
    path('<int:quiz_id>/leaderboard/', QuizLeaderboardView.as_view()),
    path('live/available/', AvailableLiveQuizListView.as_view()),
    path('live/first/', FirstLiveQuizView.as_view()),

    # Admin endpoints
    path('live/', LiveQuizListCreateView.as_view()),
    path('live/<int:quiz_id>/', LiveQuizDetailView.as_view()),
    path('live/<int:quiz_id>/archive/', LiveQuizArchiveView.as_view()),
    path('questions/preview/', QuestionPreviewView.as_view()),
]
