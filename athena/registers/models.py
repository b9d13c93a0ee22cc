from django.db import models


class RegisterEntry(models.Model):
    name = models.CharField(max_length=255)
    keterangan = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name


class Nr(RegisterEntry):
    class Meta(RegisterEntry.Meta):
        db_table = 'register_nr'
        verbose_name = 'NR'
        verbose_name_plural = 'NR'


class Tsn(RegisterEntry):
    class Meta(RegisterEntry.Meta):
        db_table = 'register_tsn'
        verbose_name = 'TSN'
        verbose_name_plural = 'TSN'


class Tsp(RegisterEntry):
    class Meta(RegisterEntry.Meta):
        db_table = 'register_tsp'
        verbose_name = 'TSP'
        verbose_name_plural = 'TSP'


class Sob(RegisterEntry):
    class Meta(RegisterEntry.Meta):
        db_table = 'register_sob'
        verbose_name = 'SOB'
        verbose_name_plural = 'SOB'
