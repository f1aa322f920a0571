from django.contrib import admin

from catalog.models import Article, Product


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "published", "created")
    list_filter = ("published",)
    search_fields = ("title", "body")
    raw_id_fields = ("image",)
    filter_horizontal = ("gallery",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "price", "created")
    search_fields = ("name", "sku", "description")
    raw_id_fields = ("thumbnail",)
    filter_horizontal = ("photos",)
