"""
Add a trailing slash to /api/ paths before URL resolution so clients may call
/api/members and /api/members/ interchangeably without a 301.
"""
from django.utils.deprecation import MiddlewareMixin


class APITrailingSlashMiddleware(MiddlewareMixin):

    def process_request(self, request):
        path_info = request.META.get("PATH_INFO", request.path_info)

        if path_info.startswith("/api/") and not path_info.endswith("/"):
            last_segment = path_info.split("/")[-1]
            # leave file-like and format-suffixed paths alone
            if "." not in last_segment and last_segment:
                new_path = path_info + "/"
                request.META["PATH_INFO"] = new_path
                request.path_info = new_path
