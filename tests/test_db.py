import threading
import time
import warnings

import pytest
from metadb import MetaDB, MetaDBError, MetaDBWarning, MergingIterator, IndexSourceError, Feature, MemoryStore
from metadb.containers import AttributeTableError


@pytest.fixture
def meta(store, index_lines):
    return MetaDB(store, index_lines)


class TestConstruction:
    def test_store_required(self, index_lines):
        with pytest.raises(MetaDBError, match='store argument required'):
            MetaDB(None, index_lines)

    def test_index_required(self, store):
        with pytest.raises(MetaDBError, match='index argument required'):
            MetaDB(store, None)
        with pytest.raises(MetaDBError, match='index argument required'):
            MetaDB(store, '')

    def test_lazy_load(self, store, tmp_path):
        meta = MetaDB(store, tmp_path / 'missing.index')
        assert not meta.loaded
        with pytest.raises(IndexSourceError):
            meta.features()
        assert not meta.loaded

    def test_feature_type_default(self, store, index_lines):
        assert MetaDB(store, index_lines).feature_type == MetaDB.DEFAULT_FEATURE_TYPE
        assert MetaDB(MemoryStore(feature_type='bigwig'), index_lines).feature_type == 'bigwig'
        assert MetaDB(store, index_lines, feature_type='wig').feature_type == 'wig'


class TestLoad:
    def test_built_once(self, meta):
        table = meta.load()
        assert meta.loaded
        assert meta.load() is table
        assert meta.meta is table
        with pytest.raises(AttributeTableError):
            table.merge('geneA', {'a': '1'})

    def test_single_read(self, store):
        class SlowLines:
            reads = 0

            def __iter__(self):
                self.reads += 1
                time.sleep(0.01)
                yield '[geneA]'
                yield 'type = gene'

        lines = SlowLines()
        meta = MetaDB(store, lines)
        tables = []
        threads = [threading.Thread(target=lambda: tables.append(meta.load())) for _ in range(8)]
        for t in threads: t.start()
        for t in threads: t.join()
        assert lines.reads == 1
        assert len(tables) == 8
        assert all(t is tables[0] for t in tables)

    def test_empty_index_warns(self, store):
        with pytest.warns(MetaDBWarning, match='defines no features'):
            MetaDB(store, ['# nothing here']).load()

    def test_from_file(self, store, tmp_path, index_lines):
        path = tmp_path / 'meta.index'
        path.write_text('\n'.join(index_lines))
        assert list(MetaDB(store, str(path)).meta) == ['geneA', 'geneB', 'geneC', 'orphan']


class TestQueries:
    def test_end_to_end(self, meta):
        feature, = meta.features('gene')
        assert feature.display_name == 'GeneA'
        assert feature.primary_tag == 'gene'
        assert feature.source_tag == 'refseq'
        assert feature.location == ('chr1', 100, 500, 0)
        assert feature.attributes['color'] == 'red'

    def test_iterator(self, meta):
        stream = meta.features(['exon', 'gene'], iterator=True)
        assert isinstance(stream, MergingIterator)
        assert [f.display_name for f in stream] == ['GeneA', 'GeneC']

    def test_types_alias(self, meta):
        assert [f.display_name for f in meta.features(types='mRNA:refseq')] == ['GeneB', 'GeneB']

    def test_all(self, meta):
        assert [f.display_name for f in meta.features()] == ['GeneA', 'GeneB', 'GeneB', 'GeneC']

    def test_get_seq_stream_pull(self, meta):
        stream = meta.get_seq_stream(attributes={'color': 'red'})
        names = []
        while (feature := stream.next_seq()) is not None:
            names.append(feature.display_name)
        assert names == ['GeneA', 'GeneB', 'GeneB']

    def test_by_location(self, meta):
        assert [f.display_name for f in meta.get_features_by_location('chr1', 450, 1100)] == ['GeneA', 'GeneB']
        assert [f.display_name for f in meta.get_features_by_location('chr2')] == ['GeneC']

    def test_by_name(self, meta):
        assert [f.start for f in meta.get_features_by_name('GeneB')] == [1000, 1800]
        assert meta.get_feature_by_name('GeneC')[0].display_name == 'GeneC'
        assert meta.get_features_by_alias('Orphan') == []
        assert meta.get_features_by_name('geneB') == []

    def test_by_attribute(self, meta):
        result = meta.get_features_by_attribute({'color': 'red', 'priority': ['1', '2']})
        assert [f.display_name for f in result] == ['GeneA']

    def test_combined_filters(self, meta):
        assert meta.features('exon', attributes={'color': 'blue'}, name='GeneC')[0].display_name == 'GeneC'
        assert meta.features('exon', attributes={'color': 'red'}) == []

    def test_repeated_queries_are_independent(self, meta):
        first = meta.features('gene')
        first[0].display_name = 'changed'
        assert meta.features('gene')[0].display_name == 'GeneA'

    def test_typed_store_features(self):
        store = MemoryStore([Feature('g', 'chr1', 1, 10, primary_tag='gene')])
        meta = MetaDB(store, ['[g]', 'type = gene'])
        assert [f.primary_tag for f in meta.features('gene')] == ['gene']
        assert len(meta.features()) == 1

    def test_declared_type_filters_store_streams(self):
        store = MemoryStore([Feature('g', 'chr1', 1, 10, primary_tag='gene')])
        assert MetaDB(store, ['[g]', 'type = gene'], feature_type='summary').features() == []

    def test_get_feature(self, meta, store):
        assert meta.get_feature('geneA') is store.get_features_by_name('geneA')[0]
        assert meta.get_feature('orphan') is None


class TestPassThrough:
    def test_seq_ids(self, meta):
        assert meta.seq_ids() == ['chr1', 'chr2']

    def test_segment(self, meta):
        assert [f.display_name for f in meta.segment('chr1', 1, 200)] == ['geneA']

    def test_unsupported(self, index_lines):
        class NameOnlyStore:
            def get_features_by_name(self, name): return []

        with pytest.raises(MetaDBError, match='does not support seq_ids'):
            MetaDB(NameOnlyStore(), index_lines).seq_ids()

    def test_no_implicit_delegation(self, meta):
        with pytest.raises(AttributeError):
            meta.add(Feature('x'))


def test_no_warning_for_populated_index(meta):
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        meta.load()
