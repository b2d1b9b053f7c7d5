import django_filters as filters

from community.models import Post

SORT_ORDERINGS = {
    "newest": ("-created_at", "-id"),
    "trending": ("-trending_score", "-created_at"),
    "popular": ("-likes_count", "-created_at"),
}


class PostFilter(filters.FilterSet):
    category = filters.ChoiceFilter(choices=Post.Category.choices)
    route = filters.NumberFilter(field_name="route_id")
    author = filters.NumberFilter(field_name="author_id")
    sort = filters.ChoiceFilter(
        choices=[(key, key) for key in SORT_ORDERINGS],
        method="sort_posts",
    )

    class Meta:
        model = Post
        fields = ["category", "route", "author", "sort"]

    def sort_posts(self, queryset, name, value):
        return queryset.order_by(*SORT_ORDERINGS[value])
