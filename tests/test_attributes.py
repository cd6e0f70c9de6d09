import numpy as np
import pytest
from metadb.containers import AttributeRecord, AttributeTable, AttributeTableError


class TestAttributeRecord:
    def test_keys_lower_cased(self):
        record = AttributeRecord({'Color': 'red', 'TYPE': 'gene'})
        assert set(record) == {'color', 'type'}
        assert record.type == 'gene'

    def test_display_name_fallback(self):
        assert AttributeRecord({'display_name': 'A', 'name': 'B'}).display_name == 'A'
        assert AttributeRecord({'name': 'B'}).display_name == 'B'
        assert AttributeRecord({'display_name': '', 'name': 'B'}).display_name == 'B'
        assert AttributeRecord().display_name is None

    def test_type_base_fallbacks(self):
        assert AttributeRecord({'type': 'Gene', 'method': 'mRNA'}).type_base() == 'gene'
        assert AttributeRecord({'method': 'mRNA', 'primary_tag': 'exon'}).type_base() == 'mrna'
        assert AttributeRecord({'primary_tag': 'Exon'}).type_base() == 'exon'
        assert AttributeRecord().type_base('Summary') == 'summary'
        assert AttributeRecord().type_base() is None

    def test_type_extended(self):
        assert AttributeRecord({'method': 'mRNA', 'source': 'RefSeq'}).type_extended == 'mrna:refseq'
        assert AttributeRecord({'method': 'mRNA'}).type_extended == 'mrna:'
        assert AttributeRecord({'source': 'refseq'}).type_extended is None

    def test_split_type(self):
        assert AttributeRecord({'type': 'gene:refseq'}).split_type() == ('gene', 'refseq')
        assert AttributeRecord({'type': 'gene'}).split_type() == ('gene', '')
        assert AttributeRecord({'type': ':refseq'}).split_type() == ('', 'refseq')
        assert AttributeRecord().split_type() == ('', '')

    def test_type_method(self):
        assert AttributeRecord({'type': 'Gene:refseq'}).type_method == 'gene'
        assert AttributeRecord({'type': 'gene'}).type_method is None

    def test_merge(self):
        merged = AttributeRecord({'a': '1', 'b': '2'}).merge({'B': '3', 'c': '4'})
        assert merged == {'a': '1', 'b': '3', 'c': '4'}

    def test_read_only(self):
        record = AttributeRecord({'a': '1'})
        with pytest.raises(TypeError):
            record['a'] = '2'
        copy = record.to_dict()
        copy['a'] = '2'
        assert record['a'] == '1'


class TestAttributeTable:
    def test_union_merge(self):
        table = AttributeTable()
        table.merge('geneA', {'a': '1', 'b': '2'})
        table.merge('geneA', {'b': '3', 'c': '4'})
        assert table['geneA'].to_dict() == {'a': '1', 'b': '3', 'c': '4'}
        assert len(table) == 1

    def test_insertion_order(self):
        table = AttributeTable([('b', {'x': '1'}), ('a', {'x': '1'}), ('b', {'y': '2'})])
        assert list(table) == ['b', 'a']

    def test_names(self):
        table = AttributeTable([('b', {'x': '1'}), ('a', {'x': '1'})])
        names = table.names
        assert names.dtype == object
        np.testing.assert_array_equal(names, ['b', 'a'])
        names[0] = 'changed'
        assert table.names[0] == 'b'

    def test_names_refresh_after_merge(self):
        table = AttributeTable([('a', {'x': '1'})])
        assert len(table.names) == 1
        table.merge('b', {'x': '2'})
        np.testing.assert_array_equal(table.names, ['a', 'b'])

    def test_empty(self):
        table = AttributeTable.build([])
        assert len(table) == 0
        assert len(table.names) == 0

    def test_frozen(self):
        table = AttributeTable.build([('a', {'x': '1'})])
        assert table.frozen
        with pytest.raises(AttributeTableError, match='frozen'):
            table.merge('a', {'x': '2'})
        assert table['a']['x'] == '1'

    def test_case_sensitive_names(self):
        table = AttributeTable([('geneA', {'x': '1'})])
        assert 'geneA' in table
        assert 'genea' not in table
