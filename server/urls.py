"""Main URL mapping configuration file.

The drive operations are exposed by an API layer outside of this
project; only the admin site is routed here.
"""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path('admin/', admin.site.urls),
]
