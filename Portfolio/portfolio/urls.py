from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("contacts.urls")),
    path("", include("public.urls")),
]

handler404 = "public.views.page_not_found"
